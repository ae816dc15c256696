"""Instrument universe and pip value lookups."""

from .models import InstrumentSpec, normalize_symbol
from .pip_values import UNKNOWN_PIP_VALUE, PipValueTable

__all__ = [
    "InstrumentSpec",
    "PipValueTable",
    "UNKNOWN_PIP_VALUE",
    "normalize_symbol",
]
