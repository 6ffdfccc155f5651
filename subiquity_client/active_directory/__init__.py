"""Active Directory enrollment."""
