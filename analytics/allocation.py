"""
Portfolio input builders.
Merge stored holdings with a market snapshot and derive value, 24h change and allocation.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from analytics.numeric import is_list, is_number, price_change_24h

logger = logging.getLogger(__name__)


class PortfolioDataError(ValueError):
    """Raised when holdings or market data cannot be turned into engine inputs."""
    pass


def merge_duplicate_holdings(holdings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Collapse holdings sharing an id into one record with the summed quantity.

    The first record keeps its position, symbol and name. Quantities are only
    summed when both are numbers; otherwise the first record's value stays.

    Args:
        holdings: Records with id, symbol, name and holding_quantity

    Returns:
        New list of holding dictionaries, one per id
    """
    merged = {}

    for holding in holdings:
        holding_id = holding.get('id')
        existing = merged.get(holding_id)

        if existing is None:
            merged[holding_id] = dict(holding)
            continue

        quantity = holding.get('holding_quantity')
        if is_number(existing.get('holding_quantity')) and is_number(quantity):
            existing['holding_quantity'] += quantity
        else:
            logger.warning(f"Could not merge quantity of duplicate holding {holding_id}: {quantity}")

    if len(merged) < len(holdings):
        logger.info(f"Merged {len(holdings) - len(merged)} duplicate holdings")

    return list(merged.values())


def build_enriched_assets(
    holdings: List[Dict[str, Any]],
    market_data: List[Dict[str, Any]]
) -> Tuple[List[Dict[str, Any]], List[str]]:
    """
    Merge holding records with their market snapshot by asset id.

    Holdings sharing an id are merged first (quantities summed). Holdings
    without market data are skipped and reported.

    Args:
        holdings: Records with id, symbol, name and holding_quantity
        market_data: Market records with id, current_price, price_change_percentage_24h, ...

    Returns:
        Tuple of (enriched assets in holdings order, ids without market data)

    Raises:
        PortfolioDataError: If inputs are not lists
    """
    if not is_list(holdings):
        raise PortfolioDataError("Holdings must be a list")

    if not is_list(market_data):
        raise PortfolioDataError("Market data must be a list")

    market_by_id = {coin['id']: coin for coin in market_data if coin.get('id')}

    enriched = []
    missing = []

    for holding in merge_duplicate_holdings(holdings):
        market = market_by_id.get(holding.get('id'))

        if market is None:
            missing.append(holding.get('id'))
            continue

        enriched.append({
            'id': holding.get('id'),
            'symbol': holding.get('symbol'),
            'name': holding.get('name'),
            **market,
            'holding_quantity': holding.get('holding_quantity')
        })

    if missing:
        logger.warning(f"No market data for {len(missing)} holdings: {missing}")

    return enriched, missing


def asset_value(asset: Dict[str, Any]) -> float:
    """Current value of a holding: current_price * holding_quantity (missing as 0)."""
    return (asset.get('current_price') or 0) * (asset.get('holding_quantity') or 0)


def calculate_total_value(assets: List[Dict[str, Any]]) -> float:
    """
    Calculate total portfolio value.

    Formula: Σ(current_price_i * holding_quantity_i)
    """
    if not is_list(assets):
        raise PortfolioDataError("Assets must be a list")

    return sum(asset_value(asset) for asset in assets)


def calculate_portfolio_change(assets: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Calculate portfolio value and its 24h change.

    change_24h = Σ(value_i * change_i / 100)
    change_percentage_24h = change_24h / (total_value - change_24h) * 100

    Args:
        assets: List of enriched asset dictionaries

    Returns:
        Dictionary with total_value, change_24h and change_percentage_24h
    """
    total_value = calculate_total_value(assets)
    change_24h = sum(asset_value(asset) * price_change_24h(asset) / 100 for asset in assets)

    previous_value = total_value - change_24h
    if total_value > 0 and previous_value != 0:
        change_percentage_24h = change_24h / previous_value * 100
    else:
        change_percentage_24h = 0.0

    return {
        'total_value': total_value,
        'change_24h': change_24h,
        'change_percentage_24h': change_percentage_24h
    }


def calculate_allocation(
    assets: List[Dict[str, Any]],
    total_value: Optional[float] = None
) -> List[Dict[str, Any]]:
    """
    Calculate allocation (value and percentage of total) per asset.

    Args:
        assets: List of enriched asset dictionaries
        total_value: Precomputed total value (computed from assets if None)

    Returns:
        List of {asset, value, percentage} in input order; percentages are 0
        when the portfolio is worth nothing
    """
    if total_value is None:
        total_value = calculate_total_value(assets)

    allocation = []
    for asset in assets:
        value = asset_value(asset)
        percentage = (value / total_value * 100) if total_value > 0 else 0.0

        allocation.append({
            'asset': asset,
            'value': value,
            'percentage': percentage
        })

    return allocation
