"""Domain services for the membership management API."""
