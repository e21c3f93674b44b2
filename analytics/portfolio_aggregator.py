"""
Portfolio aggregator - composes all analytics calculations into PortfolioAnalyticsJSON.
Pure function over holdings and a market snapshot; no IO.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from analytics import __version__
from analytics.allocation import build_enriched_assets, calculate_allocation, calculate_portfolio_change
from analytics.calculations.advanced_metrics import calculate_advanced_metrics
from analytics.calculations.diversification import (
    calculate_diversification_score,
    diversification_label,
    herfindahl_index
)
from analytics.calculations.performers import identify_performers
from analytics.calculations.risk import assess_risk_level, calculate_risk_score
from analytics.guardrails import try_calculation, validate_portfolio_data
from analytics.insights import generate_portfolio_insights

logger = logging.getLogger(__name__)


class PortfolioAggregatorError(Exception):
    """Raised when portfolio analytics composition fails."""
    pass


def compose_portfolio_analytics(
    holdings: List[Dict[str, Any]],
    market_data: List[Dict[str, Any]],
    portfolio_id: str,
    as_of_date: date,
    insight_thresholds: Optional[Dict[str, float]] = None
) -> Dict[str, Any]:
    """
    Compose all portfolio analytics into standardized JSON format.

    Args:
        holdings: Holding records (id, symbol, name, holding_quantity)
        market_data: Market snapshot records keyed by id
        portfolio_id: Identifier of the portfolio (user or file stem)
        as_of_date: Date for which analytics are calculated
        insight_thresholds: Optional overrides for insight rules

    Returns:
        Complete PortfolioAnalyticsJSON dictionary

    Raises:
        PortfolioAggregatorError: If there are no holdings or none has market data
    """
    if not holdings:
        raise PortfolioAggregatorError("Empty holdings provided")

    assets, missing = build_enriched_assets(holdings, market_data)

    if not assets:
        raise PortfolioAggregatorError(f"No market data for any holding of portfolio {portfolio_id}")

    validation = validate_portfolio_data(assets)
    if not validation['is_valid']:
        logger.warning(f"Portfolio {portfolio_id} has {len(validation['errors'])} data issues: {validation['errors']}")

    summary = calculate_portfolio_change(assets)
    total_value = summary['total_value']
    allocation = calculate_allocation(assets, total_value)

    # Engine results
    diversification_score = calculate_diversification_score(allocation)
    risk_level = assess_risk_level(allocation, assets)
    risk_factors = try_calculation(calculate_risk_score, allocation, assets)
    hhi = try_calculation(herfindahl_index, allocation)
    advanced_metrics = calculate_advanced_metrics(assets)
    performers = identify_performers(assets, total_value)

    return {
        'portfolio_id': portfolio_id,
        'as_of_date': as_of_date.isoformat(),
        'summary': {
            **summary,
            'asset_count': len(assets)
        },
        'allocation': [_allocation_entry(item) for item in allocation],
        'diversification': {
            'score': diversification_score,
            'label': diversification_label(diversification_score),
            'hhi': hhi.value
        },
        'risk': {
            'level': risk_level.value,
            'factors': risk_factors.value
        },
        'advanced_metrics': advanced_metrics,
        'performers': {
            'best_performer': _performer_entry(performers['best_performer']),
            'worst_performer': _performer_entry(performers['worst_performer'])
        },
        'insights': generate_portfolio_insights(assets, insight_thresholds),
        'validation': validation,
        'metadata': {
            'calculated_at': datetime.now().isoformat(),
            'engine_version': __version__,
            'holdings_count': len(holdings),
            'holdings_without_market_data': missing
        }
    }


def _allocation_entry(item: Dict[str, Any]) -> Dict[str, Any]:
    asset = item['asset']
    return {
        'id': asset.get('id'),
        'symbol': asset.get('symbol'),
        'value': item['value'],
        'percentage': item['percentage']
    }


def _performer_entry(performer: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if performer is None:
        return None

    asset = performer['asset']
    return {
        'id': asset.get('id'),
        'symbol': asset.get('symbol'),
        'name': asset.get('name'),
        'percentage': performer['percentage'],
        'gain_loss': performer['gain_loss'],
        'value': performer['value']
    }
