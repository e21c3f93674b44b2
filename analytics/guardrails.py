"""
Guardrails for the analytics engine - input contracts, calculation guard and validation.

Every public calculation is wrapped by safe_calculation(): errors are logged with the
function's context and converted into a documented fallback value, so callers never
need a try/except around an analytics call.
"""

import copy
import functools
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from analytics.numeric import is_list, is_number

logger = logging.getLogger(__name__)


class AnalyticsInputError(ValueError):
    """Raised when a calculation input violates its contract."""
    pass


@dataclass
class CalculationResult:
    """Tagged outcome of a calculation: ok with a value, or failed with the fallback and a reason."""
    ok: bool
    value: Any
    error: Optional[str] = None


def validate_input(
    value: Any,
    name: str,
    validator: Callable[[Any], bool],
    error_message: Optional[str] = None
) -> None:
    """
    Check a calculation input against its contract.

    Args:
        value: Value to check
        name: Input name used in the default message
        validator: Predicate that must hold for the value
        error_message: Message overriding the default

    Raises:
        AnalyticsInputError: If the predicate does not hold
    """
    if not validator(value):
        raise AnalyticsInputError(error_message or f"Invalid {name}: {value}")


def _is_invalid_number(result: Any) -> bool:
    return is_number(result) and not math.isfinite(result)


def safe_calculation(fallback: Any, error_context: str) -> Callable:
    """
    Decorator guarding a calculation with a fallback value.

    Any exception raised by the calculation is logged at ERROR and a NaN or
    infinite numeric result is logged at WARNING; in both cases a copy of the
    fallback is returned. The undecorated body stays reachable through
    ``__wrapped__`` and the fallback through ``fallback``.

    Args:
        fallback: Value returned when the calculation cannot be completed
        error_context: Name used in log messages

    Returns:
        Decorator
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Analytics calculation error in {error_context}: {e}")
                return copy.deepcopy(fallback)

            if _is_invalid_number(result):
                logger.warning(f"Analytics calculation warning in {error_context}: Invalid number result")
                return copy.deepcopy(fallback)

            return result

        wrapper.fallback = fallback
        wrapper.error_context = error_context
        return wrapper

    return decorator


def try_calculation(func: Callable, *args, **kwargs) -> CalculationResult:
    """
    Run a guarded calculation and report failures instead of hiding them.

    Args:
        func: Function decorated with safe_calculation()
        *args, **kwargs: Calculation arguments

    Returns:
        CalculationResult; on failure ``value`` holds the function's fallback
    """
    body = getattr(func, '__wrapped__', func)
    fallback = getattr(func, 'fallback', None)

    try:
        value = body(*args, **kwargs)
    except Exception as e:
        return CalculationResult(ok=False, value=copy.deepcopy(fallback), error=str(e))

    if _is_invalid_number(value):
        return CalculationResult(ok=False, value=copy.deepcopy(fallback), error="Invalid number result")

    return CalculationResult(ok=True, value=value)


def _field(asset: Any, key: str) -> Any:
    if isinstance(asset, Mapping):
        return asset.get(key)
    return None


def _is_non_negative_number(value: Any) -> bool:
    return is_number(value) and value >= 0


@safe_calculation({'is_valid': False, 'errors': ['Validation failed']}, 'validate_portfolio_data')
def validate_portfolio_data(assets: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Check portfolio data integrity and completeness.

    Advisory only: the calculations do not call this and tolerate partially
    invalid data. Checks are accumulated per asset without short-circuiting.
    An entry that is not a dictionary (e.g. None) is reported with every
    per-field error that applies to it rather than failing the whole report,
    so the other assets are still checked.

    Args:
        assets: List of enriched asset dictionaries

    Returns:
        Dictionary with is_valid flag and list of error messages
    """
    errors = []

    if not is_list(assets):
        errors.append('Assets must be an array')
        return {'is_valid': False, 'errors': errors}

    if len(assets) == 0:
        errors.append('Portfolio cannot be empty')
        return {'is_valid': False, 'errors': errors}

    for index, asset in enumerate(assets, start=1):
        if not _field(asset, 'id'):
            errors.append(f"Asset {index}: Missing ID")

        if not _field(asset, 'symbol'):
            errors.append(f"Asset {index}: Missing symbol")

        if not _is_non_negative_number(_field(asset, 'current_price')):
            errors.append(f"Asset {index}: Invalid current price")

        if not _is_non_negative_number(_field(asset, 'holding_quantity')):
            errors.append(f"Asset {index}: Invalid holding quantity")

        change = _field(asset, 'price_change_percentage_24h')
        if change is not None and not is_number(change):
            errors.append(f"Asset {index}: Invalid price change percentage")

    return {
        'is_valid': len(errors) == 0,
        'errors': errors
    }
