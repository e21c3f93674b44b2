#!/usr/bin/env python3
"""
CLI tool for analyzing a portfolio.
Usage: python analytics/analyze_portfolio.py HOLDINGS --market-data SNAPSHOT [options]
"""

import sys
import json
import logging
import argparse
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from analytics.analysis_job import analyze_portfolio
from analytics.config import get_log_level, get_output_dir


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Calculate portfolio analytics from holdings and a market snapshot',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analytics/analyze_portfolio.py holdings.json --market-data markets.json
  python analytics/analyze_portfolio.py holdings.csv --market-data markets.json --portfolio-id alice
        """
    )

    parser.add_argument('holdings', help='Holdings file (JSON or CSV with id, symbol, name, holding_quantity)')
    parser.add_argument('--market-data',
                       required=True,
                       help='Market snapshot JSON (list of coin market records)')
    parser.add_argument('--portfolio-id',
                       help='Portfolio identifier (default: holdings file name)')
    parser.add_argument('--output',
                       help='Output JSON file path (default: $PORTFOLIO_ANALYTICS_OUTPUT_DIR/{PORTFOLIO_ID}.json)')
    parser.add_argument('--as-of',
                       type=date.fromisoformat,
                       default=date.today(),
                       help='Analysis date (YYYY-MM-DD, default: today)')
    parser.add_argument('--quiet', '-q',
                       action='store_true',
                       help='Minimal output (just success/failure)')

    args = parser.parse_args()

    logging.basicConfig(
        level=get_log_level(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    portfolio_id = args.portfolio_id or Path(args.holdings).stem

    # Set default output path
    if args.output is None:
        args.output = get_output_dir() / f'{portfolio_id}.json'
    else:
        args.output = Path(args.output)

    if not args.quiet:
        print(f"🔍 Analyzing portfolio {portfolio_id}")
        print(f"📁 Holdings: {args.holdings}")
        print(f"📊 Market data: {args.market_data}")
        print(f"📅 Analysis date: {args.as_of}")
        print()

    result = analyze_portfolio(
        holdings_path=Path(args.holdings),
        market_data_path=Path(args.market_data),
        output_path=args.output,
        portfolio_id=portfolio_id,
        as_of_date=args.as_of
    )

    if result['status'] == 'completed':
        if not args.quiet:
            print("✅ Analysis completed successfully!")
            print(f"🪙 Assets analyzed: {result['assets_analyzed']}")
            if result['holdings_without_market_data']:
                print(f"⚠️  Holdings without market data: {result['holdings_without_market_data']}")
            print(f"💡 Insights: {result['insights_generated']}")
            print(f"💾 Results saved to: {result['output_path']}")
            print()

            _show_quick_summary(result['output_path'])
        else:
            print(f"✅ {portfolio_id} analysis complete: {result['output_path']}")

        sys.exit(0)

    print(f"❌ Analysis failed for {portfolio_id}: {result['error_message']}", file=sys.stderr)
    sys.exit(1)


def _show_quick_summary(output_path: str):
    """Show quick summary of calculated analytics."""
    try:
        with open(output_path, 'r') as f:
            analytics = json.load(f)
    except (OSError, ValueError) as e:
        print(f"⚠️  Could not show summary: {e}")
        return

    summary = analytics['summary']
    print(f"📋 Quick Summary for {analytics['portfolio_id']}:")
    print(f"   Total Value: ${summary['total_value']:,.2f} ({summary['change_percentage_24h']:+.2f}% 24h)")
    print(f"   Diversification: {analytics['diversification']['score']:.2f}/100 ({analytics['diversification']['label']})")
    print(f"   Risk Level: {analytics['risk']['level']}")
    print()


if __name__ == '__main__':
    main()
