"""
Advanced portfolio metrics from a single 24h snapshot.

These reuse the one data point available per asset (24h % change) as a
cross-sectional proxy for textbook quantities:
- volatility: population standard deviation of 24h changes
- sharpe_ratio: mean change / volatility (risk-free rate 0)
- max_drawdown: magnitude of the worst 24h change, 0 if none fell

They are not time-series statistics.
"""

from typing import Any, Dict, List

import numpy as np

from analytics.guardrails import safe_calculation, validate_input
from analytics.numeric import is_list, price_change_24h, round_half_up

ZERO_METRICS = {
    'volatility': 0.0,
    'sharpe_ratio': 0.0,
    'max_drawdown': 0.0
}


def price_changes(assets: List[Dict[str, Any]]) -> np.ndarray:
    """
    Collect 24h changes of all assets, missing values as 0.

    Args:
        assets: List of enriched asset dictionaries

    Returns:
        Float array in input order
    """
    return np.array([price_change_24h(asset) for asset in assets], dtype=float)


@safe_calculation(ZERO_METRICS, 'calculate_advanced_metrics')
def calculate_advanced_metrics(assets: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Calculate volatility, Sharpe ratio and max drawdown, each rounded to 2 decimals.

    Args:
        assets: List of enriched asset dictionaries

    Returns:
        Dictionary with volatility, sharpe_ratio and max_drawdown; all zero
        for an empty or malformed portfolio
    """
    validate_input(assets, 'assets', is_list)

    if len(assets) == 0:
        return dict(ZERO_METRICS)

    changes = price_changes(assets)
    validate_input(changes, 'price changes', lambda val: bool(np.all(np.isfinite(val))),
                   'Price changes must be finite')

    mean_change = float(np.mean(changes))
    raw_volatility = float(np.std(changes))
    volatility = round_half_up(raw_volatility)

    # Sharpe is undefined without dispersion
    if volatility != 0:
        sharpe_ratio = round_half_up(mean_change / raw_volatility)
    else:
        sharpe_ratio = 0.0

    max_drawdown = round_half_up(abs(min(0.0, float(np.min(changes)))))

    return {
        'volatility': volatility,
        'sharpe_ratio': sharpe_ratio,
        'max_drawdown': max_drawdown
    }
