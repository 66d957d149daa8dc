"""Structural validation of context document markup."""

from .schema import validate_schema

__all__ = ["validate_schema"]
