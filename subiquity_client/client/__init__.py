"""Typed client facade over the installer backend API."""
