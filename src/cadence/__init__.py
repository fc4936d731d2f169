"""cadence - recurring event occurrence expansion."""
