"""
Environment-driven settings for the analytics tools.
Values are read at call time so tests can override them with monkeypatch.setenv.
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

load_dotenv()


def get_output_dir() -> Path:
    return Path(os.getenv('PORTFOLIO_ANALYTICS_OUTPUT_DIR', './data/processed/analytics'))


def get_log_level() -> str:
    return os.getenv('PORTFOLIO_ANALYTICS_LOG_LEVEL', 'INFO').upper()


def get_insight_thresholds() -> Dict[str, float]:
    """
    Thresholds for rule-based insights.

    Returns:
        Dictionary with concentration_pct, performer_move_pct and min_assets
    """
    return {
        'concentration_pct': float(os.getenv('INSIGHT_CONCENTRATION_PCT', '50')),
        'performer_move_pct': float(os.getenv('INSIGHT_PERFORMER_MOVE_PCT', '10')),
        'min_assets': int(os.getenv('INSIGHT_MIN_ASSETS', '5'))
    }
