"""Ubuntu Pro attachment and contract selection."""
