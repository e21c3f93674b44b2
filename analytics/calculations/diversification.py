"""
Diversification calculation utilities.
Herfindahl-Hirschman Index over allocation percentages, inverted into a 0-100 score.
"""

from typing import Any, Dict, List, Optional

from analytics.guardrails import safe_calculation, validate_input
from analytics.numeric import is_list, is_number, round_half_up


def _is_valid_percentage(value: Any) -> bool:
    return is_number(value) and 0 <= value <= 100


def herfindahl_index(allocation: List[Dict[str, Any]]) -> float:
    """
    Calculate Herfindahl-Hirschman Index (HHI) on the percentage scale.

    HHI = Σ(percentage_i²), so each term lies in 0-10000

    Args:
        allocation: List of allocation dictionaries with 'percentage' in [0, 100]

    Returns:
        HHI (10000 = whole portfolio in one asset)

    Raises:
        AnalyticsInputError: If allocation is not a list or a percentage is out of range
    """
    validate_input(allocation, 'allocation', is_list, 'Allocation must be an array')

    hhi = 0.0
    for item in allocation:
        percentage = item.get('percentage')
        validate_input(percentage, 'percentage', _is_valid_percentage)
        hhi += percentage ** 2

    return hhi


@safe_calculation(0.0, 'calculate_diversification_score')
def calculate_diversification_score(allocation: List[Dict[str, Any]]) -> float:
    """
    Calculate diversification score from allocation percentages.

    Formula: score = clamp(100 - HHI / 100, 0, 100), rounded to 2 decimals.
    Empty and single-asset portfolios score 0.

    Args:
        allocation: List of allocation dictionaries

    Returns:
        Score from 0 (concentrated) to 100 (evenly spread); 0 when the
        allocation violates its contract
    """
    validate_input(allocation, 'allocation', is_list, 'Allocation must be an array')

    if len(allocation) == 0:
        return 0.0

    # Single asset = no diversification
    if len(allocation) == 1:
        return 0.0

    hhi = herfindahl_index(allocation)
    score = max(0.0, min(100.0, 100 - hhi / 100))

    return round_half_up(score)


def diversification_label(score: Optional[float]) -> str:
    """
    Provide interpretation of a diversification score.

    Args:
        score: Diversification score (0-100)

    Returns:
        'Poor' (up to 30), 'Moderate' (up to 60) or 'Good'
    """
    if score is None:
        return "No data"
    elif score <= 30:
        return "Poor"
    elif score <= 60:
        return "Moderate"
    else:
        return "Good"
