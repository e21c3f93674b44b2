#!/usr/bin/env python3
"""
CLI tool for displaying calculated portfolio analytics.
Usage: python analytics/show_analytics.py PORTFOLIO_ID [options]
"""

import sys
import json
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from analytics.config import get_output_dir


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Display calculated analytics for a portfolio',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analytics/show_analytics.py alice
  python analytics/show_analytics.py alice --analytics-dir ./custom/analytics/
        """
    )

    parser.add_argument('portfolio_id', help='Portfolio identifier (e.g., alice)')
    parser.add_argument('--analytics-dir',
                       default=None,
                       help='Directory containing analytics JSON files (default: $PORTFOLIO_ANALYTICS_OUTPUT_DIR)')
    parser.add_argument('--format',
                       choices=['summary', 'full', 'json'],
                       default='summary',
                       help='Output format (default: summary)')

    args = parser.parse_args()

    analytics_dir = Path(args.analytics_dir) if args.analytics_dir else get_output_dir()
    analytics_file = analytics_dir / f'{args.portfolio_id}.json'

    if not analytics_file.exists():
        print(f"❌ No analytics found for {args.portfolio_id}", file=sys.stderr)
        print(f"📁 Looked in: {analytics_file}", file=sys.stderr)
        print(f"💡 Run analysis first: python analytics/analyze_portfolio.py HOLDINGS --market-data SNAPSHOT", file=sys.stderr)
        sys.exit(1)

    try:
        with open(analytics_file, 'r') as f:
            analytics = json.load(f)
    except (OSError, ValueError) as e:
        print(f"❌ Failed to load analytics: {e}", file=sys.stderr)
        sys.exit(1)

    if args.format == 'json':
        print(json.dumps(analytics, indent=2))
    elif args.format == 'full':
        _display_summary(analytics)
        _display_details(analytics)
    else:  # summary
        _display_summary(analytics)


def _display_summary(analytics: dict):
    """Display concise summary of key analytics."""
    print(f"📊 Portfolio {analytics['portfolio_id']} (as of {analytics['as_of_date']})")
    print("=" * 50)

    summary = analytics.get('summary', {})
    change_pct = summary.get('change_percentage_24h', 0)
    direction = "📈" if change_pct > 0 else "📉" if change_pct < 0 else "➡️"
    print(f"💰 Total Value: ${summary.get('total_value', 0):,.2f} {direction} {change_pct:+.2f}% (24h)")
    print(f"🪙 Assets: {summary.get('asset_count', 0)}")

    diversification = analytics.get('diversification', {})
    print(f"\n🧩 Diversification: {diversification.get('score', 0):.2f}/100 ({diversification.get('label')})")
    print(f"⚖️  Risk Level: {analytics.get('risk', {}).get('level')}")

    metrics = analytics.get('advanced_metrics', {})
    print("\n📐 24h Metrics:")
    print(f"   Volatility  : {metrics.get('volatility', 0):.2f}%")
    print(f"   Sharpe Ratio: {metrics.get('sharpe_ratio', 0):.2f}")
    print(f"   Max Drawdown: -{metrics.get('max_drawdown', 0):.2f}%")

    performers = analytics.get('performers', {})
    best = performers.get('best_performer')
    worst = performers.get('worst_performer')
    print("\n🏆 Performers (24h):")
    if best:
        print(f"   Best : {best['symbol'] or '-'} {best['percentage']:+.2f}% (${best['gain_loss']:+,.2f})")
    else:
        print("   Best : None gained")
    if worst:
        print(f"   Worst: {worst['symbol'] or '-'} {worst['percentage']:+.2f}% (${worst['gain_loss']:+,.2f})")
    else:
        print("   Worst: None lost")

    validation = analytics.get('validation', {})
    if not validation.get('is_valid', True):
        print("\n⚠️  Data issues:")
        for error in validation.get('errors', []):
            print(f"   • {error}")


def _display_details(analytics: dict):
    """Display allocation breakdown, risk factors and insights."""
    print("\n📦 Allocation:")
    for item in analytics.get('allocation', []):
        print(f"   {item['symbol'] or '-':8}: {item['percentage']:6.2f}%  ${item['value']:,.2f}")

    factors = analytics.get('risk', {}).get('factors')
    if factors:
        print("\n⚖️  Risk Factors:")
        print(f"   Concentration: {factors['concentration']} pts")
        print(f"   Asset Count  : {factors['asset_count']} pts")
        print(f"   Volatility   : {factors['volatility']} pts")
        print(f"   Total        : {factors['total']}/100")

    insights = analytics.get('insights', [])
    if insights:
        print("\n💡 Insights:")
        for insight in insights:
            print(f"   • {insight['title']}: {insight['description']}")


if __name__ == '__main__':
    main()
