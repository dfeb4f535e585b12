"""Type aliases shared across layers."""

from typing import Any

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]

# Column name -> value equality filters handed to the repository
type StoreFilters = dict[str, Any]
