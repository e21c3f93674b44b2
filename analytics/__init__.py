"""
Portfolio Analytics Engine

Calculates portfolio-level analytics from enriched crypto holdings:
- Diversification score (inverted HHI)
- Risk level (concentration, asset count, 24h volatility)
- Advanced metrics (volatility, Sharpe ratio, max drawdown)
- Best and worst 24h performers
"""

__version__ = "0.1.0"
