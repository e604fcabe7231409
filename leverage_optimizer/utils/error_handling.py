"""Error handling utilities.

Numeric failures inside the allocator are reported as data (an invalid
AllocationResult with a reason code). The exceptions below are raised only by
the collaborators around the core: chain loading and configuration.
"""

import math
import numbers
from typing import Any, Tuple


def is_positive_finite(value: Any) -> bool:
    """Check that a value is a real number, finite and strictly positive.

    Accepts any real number type, numpy scalars included; bool is rejected.

    Args:
        value: Value to check (None and non-numeric values are rejected)

    Returns:
        True if value is a finite number greater than zero

    Example:
        >>> is_positive_finite(175.5)
        True
        >>> is_positive_finite(float('nan'))
        False
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and bool(value > 0)


def validate_contract_data(contract_dict: dict) -> Tuple[bool, str]:
    """Validate option contract data for completeness and sanity.

    Args:
        contract_dict: Dictionary with parsed contract fields
            (strike, expiry, premium, delta, type)

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> data = {"strike": 170, "expiry": "2025-11-15", "premium": 8.5,
        ...         "delta": 0.65, "type": "call"}
        >>> validate_contract_data(data)
        (True, '')
    """
    required_fields = ['strike', 'expiry', 'premium', 'delta', 'type']

    for field in required_fields:
        if contract_dict.get(field) in (None, ''):
            return False, f"Missing required field: {field}"

    if contract_dict['type'] not in ('call', 'put'):
        return False, f"Invalid option type: {contract_dict['type']}"

    if not is_positive_finite(contract_dict['strike']):
        return False, f"Invalid strike price: {contract_dict['strike']}"

    if not is_positive_finite(contract_dict['premium']):
        return False, f"Invalid premium: {contract_dict['premium']}"

    delta = contract_dict['delta']
    if not isinstance(delta, numbers.Real) or not math.isfinite(delta):
        return False, f"Invalid delta: {delta}"

    if abs(delta) > 1.0:
        return False, f"Delta {delta} outside valid range [-1, 1]"

    # Call delta should be positive, put delta negative
    if contract_dict['type'] == 'call' and delta <= 0:
        return False, f"Call option has non-positive delta: {delta}"
    if contract_dict['type'] == 'put' and delta > 0:
        return False, f"Put option has positive delta: {delta}"

    return True, ""


class OptimizerError(Exception):
    """Base exception for optimizer collaborators."""
    pass


class DataValidationError(ValueError, OptimizerError):
    """Raised when option chain data fails validation.

    Inherits from ValueError so callers may catch either.
    """
    pass


class ConfigurationError(OptimizerError):
    """Raised when configuration or allocation parameters are invalid."""
    pass
