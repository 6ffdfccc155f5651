"""Archive mirror selection."""
