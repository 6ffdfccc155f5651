"""Keyboard settings and the keyboard detection wizard."""
