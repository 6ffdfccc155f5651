"""Installer metadata: client variant, install sources and application status."""
