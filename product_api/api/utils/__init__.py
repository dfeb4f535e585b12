"""Helpers shared by the API layer (response classes)."""
