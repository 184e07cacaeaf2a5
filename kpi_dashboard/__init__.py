# kpi_dashboard/__init__.py
"""
Sales KPI & Targeting Dashboard Core

This package contains:
- config: Configuration management (.env + environment) and logging setup
- targeting: Scoring, planning, allocation and carry-over engines

Usage:
    from kpi_dashboard import config, configure_logging
    from kpi_dashboard.targeting import AppState, allocate
"""

# Configuration
from .config import (
    config,
    Config,
    APP_CONFIG,
    configure_logging,
)

__all__ = [
    # Config
    'config',
    'Config',
    'APP_CONFIG',
    'configure_logging',
]

__version__ = '1.0.0'
