"""Core data models for options leverage optimization."""

from .allocation import AllocationParameters, AllocationResult
from .option import CONTRACT_MULTIPLIER, OptionContract
from .quote import Quote

__all__ = [
    "OptionContract",
    "Quote",
    "AllocationParameters",
    "AllocationResult",
    "CONTRACT_MULTIPLIER",
]
