"""
Best and worst performer identification from 24h changes.
"""

from functools import reduce
from typing import Any, Dict, List, Optional

from analytics.guardrails import safe_calculation, validate_input
from analytics.numeric import is_list, is_number, price_change_24h


def performer_data(asset: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the performance summary of one holding.

    Args:
        asset: Enriched asset dictionary

    Returns:
        Dictionary with asset, percentage (24h change), gain_loss and value
    """
    value = (asset.get('current_price') or 0) * (asset.get('holding_quantity') or 0)
    percentage = price_change_24h(asset)

    return {
        'asset': asset,
        'percentage': percentage,
        'gain_loss': value * (percentage / 100),
        'value': value
    }


def _better(best: Dict[str, Any], current: Dict[str, Any]) -> Dict[str, Any]:
    return current if current['percentage'] > best['percentage'] else best


def _worse(worst: Dict[str, Any], current: Dict[str, Any]) -> Dict[str, Any]:
    return current if current['percentage'] < worst['percentage'] else worst


@safe_calculation({'best_performer': None, 'worst_performer': None}, 'identify_performers')
def identify_performers(
    assets: List[Dict[str, Any]],
    total_portfolio_value: float
) -> Dict[str, Optional[Dict[str, Any]]]:
    """
    Identify the best and worst 24h performers.

    Left fold over the assets, so the first asset wins a tie. A best performer
    is only reported if it gained and a worst performer only if it lost.

    Args:
        assets: List of enriched asset dictionaries
        total_portfolio_value: Precomputed portfolio value (must be >= 0)

    Returns:
        Dictionary with best_performer and worst_performer (or None)
    """
    validate_input(assets, 'assets', is_list)
    validate_input(
        total_portfolio_value, 'total_portfolio_value',
        lambda val: is_number(val) and val >= 0
    )

    if len(assets) == 0:
        return {'best_performer': None, 'worst_performer': None}

    performance = [performer_data(asset) for asset in assets]

    best = reduce(_better, performance)
    worst = reduce(_worse, performance)

    return {
        'best_performer': best if best['percentage'] > 0 else None,
        'worst_performer': worst if worst['percentage'] < 0 else None
    }
