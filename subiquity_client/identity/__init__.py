"""User identity and SSH server settings."""
