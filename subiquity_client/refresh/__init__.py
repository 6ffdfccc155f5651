"""Installer snap refresh and snapd change tracking."""
