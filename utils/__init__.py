# utils/__init__.py
"""Utilities, formatting helpers and shared exceptions."""

from .helpers import (
    format_currency,
    format_currency_full,
    format_percentage,
    round_currency,
    safe_divide,
    clamp,
    budget_range
)
from .exceptions import ParameterValidationError, UnknownCategoryError, UnknownScenarioError

__all__ = [
    'format_currency',
    'format_currency_full',
    'format_percentage',
    'round_currency',
    'safe_divide',
    'clamp',
    'budget_range',
    'ParameterValidationError',
    'UnknownCategoryError',
    'UnknownScenarioError'
]
