"""Pydantic models for API responses.

All envelopes serialize with camelCase keys and carry a ``status`` field.
"""
