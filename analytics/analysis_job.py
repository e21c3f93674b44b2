"""
Orchestrated analysis job - holdings + market snapshot files to PortfolioAnalyticsJSON.
Loads inputs, calls the aggregator, persists the analytics JSON.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from analytics.portfolio_aggregator import compose_portfolio_analytics

logger = logging.getLogger(__name__)

REQUIRED_HOLDING_COLUMNS = ['id', 'symbol', 'holding_quantity']


class AnalysisJobError(Exception):
    """Raised when analysis job inputs cannot be loaded."""
    pass


def load_holdings(holdings_path: Path) -> List[Dict[str, Any]]:
    """
    Load holding records from a CSV or JSON file.

    JSON may be a list of records or a stored portfolio document with an
    'assets' list.

    Args:
        holdings_path: Path to holdings file

    Returns:
        List of holding dictionaries with numeric holding_quantity

    Raises:
        AnalysisJobError: If the file is missing, unreadable or lacks required columns
    """
    holdings_path = Path(holdings_path)

    if not holdings_path.exists():
        raise AnalysisJobError(f"Holdings file not found: {holdings_path}")

    try:
        if holdings_path.suffix.lower() == '.csv':
            df = pd.read_csv(holdings_path)
        else:
            with open(holdings_path, 'r') as f:
                raw = json.load(f)

            records = raw.get('assets', []) if isinstance(raw, dict) else raw
            df = pd.DataFrame(records)
    except (OSError, ValueError) as e:
        raise AnalysisJobError(f"Failed to read holdings from {holdings_path}: {e}")

    if df.empty:
        return []

    missing_columns = [col for col in REQUIRED_HOLDING_COLUMNS if col not in df.columns]
    if missing_columns:
        raise AnalysisJobError(f"Holdings file missing required columns: {missing_columns}")

    df = df.dropna(subset=['id']).copy()
    df['holding_quantity'] = pd.to_numeric(df['holding_quantity'], errors='coerce')

    invalid = df['holding_quantity'].isna()
    if invalid.any():
        logger.warning(f"Dropping {int(invalid.sum())} holdings with non-numeric quantity")
        df = df[~invalid]

    # NaN -> None so records serialize and validate cleanly
    df = df.astype(object).where(pd.notnull(df), None)

    return df.to_dict('records')


def load_market_data(market_data_path: Path) -> List[Dict[str, Any]]:
    """
    Load a market snapshot (list of coin market records) from JSON.

    Args:
        market_data_path: Path to JSON file, a list or {'data': [...]}

    Returns:
        List of market dictionaries

    Raises:
        AnalysisJobError: If the file is missing or not a list of records
    """
    market_data_path = Path(market_data_path)

    if not market_data_path.exists():
        raise AnalysisJobError(f"Market data file not found: {market_data_path}")

    try:
        with open(market_data_path, 'r') as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        raise AnalysisJobError(f"Failed to read market data from {market_data_path}: {e}")

    records = raw.get('data') if isinstance(raw, dict) else raw

    if not isinstance(records, list):
        raise AnalysisJobError("Market data must be a list of coin records")

    return records


def analyze_portfolio(
    holdings_path: Path,
    market_data_path: Path,
    output_path: Path,
    portfolio_id: Optional[str] = None,
    as_of_date: Optional[date] = None
) -> Dict[str, Any]:
    """
    Run complete analytics for a portfolio and save results to JSON.

    Args:
        holdings_path: Holdings file (CSV or JSON)
        market_data_path: Market snapshot JSON
        output_path: Path to save PortfolioAnalyticsJSON file
        portfolio_id: Portfolio identifier (defaults to holdings file stem)
        as_of_date: Date for analysis (defaults to today)

    Returns:
        Dictionary with job status and summary; failures are reported with
        status 'failed' rather than raised
    """
    if as_of_date is None:
        as_of_date = date.today()

    if portfolio_id is None:
        portfolio_id = Path(holdings_path).stem

    start_time = datetime.now()

    try:
        holdings = load_holdings(holdings_path)
        market_data = load_market_data(market_data_path)

        if not holdings:
            return _failed(portfolio_id, f'No holdings found for portfolio {portfolio_id}', start_time)

        analytics_json = compose_portfolio_analytics(
            holdings=holdings,
            market_data=market_data,
            portfolio_id=portfolio_id,
            as_of_date=as_of_date
        )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w') as f:
            json.dump(analytics_json, f, indent=2, default=str)

        logger.info(f"Saved analytics for {portfolio_id} to {output_path}")

        return {
            'portfolio_id': portfolio_id,
            'status': 'completed',
            'output_path': str(output_path),
            'assets_analyzed': analytics_json['summary']['asset_count'],
            'holdings_without_market_data': len(analytics_json['metadata']['holdings_without_market_data']),
            'insights_generated': len(analytics_json['insights']),
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }

    except Exception as e:
        logger.error(f"Analysis failed for {portfolio_id}: {e}")
        return _failed(portfolio_id, str(e), start_time)


def _failed(portfolio_id: str, message: str, start_time: datetime) -> Dict[str, Any]:
    return {
        'portfolio_id': portfolio_id,
        'status': 'failed',
        'error_message': message,
        'output_path': None,
        'assets_analyzed': 0,
        'duration_seconds': (datetime.now() - start_time).total_seconds()
    }


def batch_analyze_portfolios(
    holdings_paths: List[Path],
    market_data_path: Path,
    output_dir: Path,
    as_of_date: Optional[date] = None
) -> Dict[str, Any]:
    """
    Run analytics for several portfolios against one market snapshot.

    Args:
        holdings_paths: Holdings files, one per portfolio
        market_data_path: Shared market snapshot JSON
        output_dir: Directory to save JSON files ({portfolio_id}.json)
        as_of_date: Analysis date

    Returns:
        Summary of batch results
    """
    if as_of_date is None:
        as_of_date = date.today()

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    results = []
    start_time = datetime.now()

    for holdings_path in holdings_paths:
        portfolio_id = Path(holdings_path).stem

        result = analyze_portfolio(
            holdings_path=holdings_path,
            market_data_path=market_data_path,
            output_path=output_dir / f'{portfolio_id}.json',
            portfolio_id=portfolio_id,
            as_of_date=as_of_date
        )

        results.append(result)

    completed = [r for r in results if r['status'] == 'completed']
    failed = [r for r in results if r['status'] == 'failed']

    return {
        'total_portfolios': len(holdings_paths),
        'completed': len(completed),
        'failed': len(failed),
        'success_rate': len(completed) / len(holdings_paths) if holdings_paths else 0,
        'duration_seconds': (datetime.now() - start_time).total_seconds(),
        'results': results
    }
