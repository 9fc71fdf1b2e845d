"""Utility functions for the invoice dashboard."""

from .numeric import from_minor_units, parse_amount, to_minor_units
from .result import Err, Ok, Result

__all__ = [
    "from_minor_units",
    "parse_amount",
    "to_minor_units",
    "Err",
    "Ok",
    "Result",
]
