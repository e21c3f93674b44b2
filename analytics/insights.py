"""
Rule-based portfolio insights.
Turns concentration, 24h moves, asset count and core-asset coverage into short advisory messages.
"""

from functools import reduce
from typing import Any, Dict, List, Optional

from analytics.allocation import asset_value, calculate_total_value
from analytics.config import get_insight_thresholds
from analytics.numeric import price_change_24h

MAJOR_ASSET_SYMBOLS = ('btc', 'eth')


def _insight(
    insight_id: str,
    insight_type: str,
    title: str,
    description: str,
    action: str,
    confidence: int,
    impact: str,
    related_assets: List[str]
) -> Dict[str, Any]:
    return {
        'id': insight_id,
        'type': insight_type,
        'title': title,
        'description': description,
        'action': action,
        'confidence': confidence,
        'impact': impact,
        'related_assets': related_assets
    }


def generate_portfolio_insights(
    assets: List[Dict[str, Any]],
    thresholds: Optional[Dict[str, float]] = None
) -> List[Dict[str, Any]]:
    """
    Generate advisory insights for a portfolio.

    Args:
        assets: List of enriched asset dictionaries
        thresholds: Overrides for concentration_pct, performer_move_pct and
            min_assets (defaults from environment)

    Returns:
        List of insight dictionaries, in rule order
    """
    if not assets:
        return []

    limits = get_insight_thresholds()
    if thresholds:
        limits.update(thresholds)

    insights = []

    # Concentration
    total_value = calculate_total_value(assets)
    largest = reduce(lambda best, asset: asset if asset_value(asset) > asset_value(best) else best, assets)

    if total_value > 0:
        concentration_pct = asset_value(largest) / total_value * 100

        if concentration_pct > limits['concentration_pct']:
            insights.append(_insight(
                'concentration-risk', 'warning', 'High Concentration Risk',
                f"{largest.get('symbol')} represents {concentration_pct:.1f}% of your portfolio. "
                f"Consider diversifying to reduce risk.",
                'Diversify Portfolio', 85, 'high', [largest.get('id')]
            ))

    # 24h moves
    top = reduce(lambda best, asset: asset if price_change_24h(asset) > price_change_24h(best) else best, assets)
    bottom = reduce(lambda worst, asset: asset if price_change_24h(asset) < price_change_24h(worst) else worst, assets)

    if price_change_24h(top) > limits['performer_move_pct']:
        insights.append(_insight(
            'top-performer', 'success', 'Strong Performance Alert',
            f"{top.get('name')} is up {price_change_24h(top):.2f}% today. Consider taking some profits.",
            'Review Position', 75, 'medium', [top.get('id')]
        ))

    if price_change_24h(bottom) < -limits['performer_move_pct']:
        insights.append(_insight(
            'worst-performer', 'warning', 'Significant Decline',
            f"{bottom.get('name')} is down {abs(price_change_24h(bottom)):.2f}% today. "
            f"Monitor closely for further developments.",
            'Analyze Fundamentals', 70, 'medium', [bottom.get('id')]
        ))

    # Portfolio size
    if len(assets) < limits['min_assets']:
        insights.append(_insight(
            'diversification-opportunity', 'info', 'Diversification Opportunity',
            f"You have {len(assets)} assets. Consider adding more cryptocurrencies to improve diversification.",
            'Explore Assets', 60, 'medium', []
        ))

    # Core assets
    symbols = {str(asset.get('symbol') or '').lower() for asset in assets}
    if not symbols.intersection(MAJOR_ASSET_SYMBOLS):
        insights.append(_insight(
            'major-assets-missing', 'info', 'Consider Major Assets',
            'Your portfolio lacks Bitcoin or Ethereum. These are often considered foundational crypto assets.',
            'Research BTC/ETH', 65, 'low', []
        ))

    return insights
