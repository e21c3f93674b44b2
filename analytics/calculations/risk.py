"""
Risk level assessment.

Additive scorecard over three independent factors (max 100 points):
- Concentration: largest allocation >70% -> 40, >40% -> 20
- Asset count: <3 assets -> 30, <5 assets -> 15
- Volatility: mean |24h change| >10% -> 30, >5% -> 15

Total >= 60 is High, >= 30 Medium, otherwise Low.
"""

from enum import Enum
from typing import Any, Dict, List

from analytics.guardrails import safe_calculation, validate_input
from analytics.numeric import is_list, price_change_24h


class RiskLevel(str, Enum):
    """Enumeration of portfolio risk levels."""
    LOW = 'Low'
    MEDIUM = 'Medium'
    HIGH = 'High'


def concentration_points(largest_percentage: float) -> int:
    if largest_percentage > 70:
        return 40
    elif largest_percentage > 40:
        return 20
    return 0


def asset_count_points(asset_count: int) -> int:
    if asset_count < 3:
        return 30
    elif asset_count < 5:
        return 15
    return 0


def volatility_points(average_abs_change: float) -> int:
    if average_abs_change > 10:
        return 30
    elif average_abs_change > 5:
        return 15
    return 0


def classify_risk_score(total: float) -> RiskLevel:
    if total >= 60:
        return RiskLevel.HIGH
    elif total >= 30:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_risk_score(
    allocation: List[Dict[str, Any]],
    assets: List[Dict[str, Any]]
) -> Dict[str, float]:
    """
    Calculate the per-factor risk scorecard.

    Args:
        allocation: List of allocation dictionaries
        assets: List of enriched asset dictionaries

    Returns:
        Dictionary with concentration, asset_count and volatility points, the
        inputs they were derived from, and their total

    Raises:
        AnalyticsInputError: If inputs are not lists or either is empty
    """
    validate_input(allocation, 'allocation', is_list)
    validate_input(assets, 'assets', is_list)
    validate_input(
        allocation, 'allocation', lambda val: len(val) > 0 and len(assets) > 0,
        'Risk score needs at least one allocation and one asset'
    )

    largest_percentage = max(item['percentage'] for item in allocation)
    average_abs_change = sum(abs(price_change_24h(asset)) for asset in assets) / len(assets)

    factors = {
        'concentration': concentration_points(largest_percentage),
        'asset_count': asset_count_points(len(assets)),
        'volatility': volatility_points(average_abs_change),
    }

    return {
        **factors,
        'total': sum(factors.values()),
        'largest_allocation_pct': largest_percentage,
        'average_abs_change_24h': average_abs_change
    }


@safe_calculation(RiskLevel.LOW, 'assess_risk_level')
def assess_risk_level(
    allocation: List[Dict[str, Any]],
    assets: List[Dict[str, Any]]
) -> RiskLevel:
    """
    Classify portfolio risk as Low, Medium or High.

    Empty inputs are Low by convention, not by calculation.

    Args:
        allocation: List of allocation dictionaries
        assets: List of enriched asset dictionaries

    Returns:
        RiskLevel (Low when inputs are malformed)
    """
    validate_input(allocation, 'allocation', is_list)
    validate_input(assets, 'assets', is_list)

    if len(allocation) == 0 or len(assets) == 0:
        return RiskLevel.LOW

    scorecard = calculate_risk_score(allocation, assets)

    return classify_risk_score(scorecard['total'])
