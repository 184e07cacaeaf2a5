# kpi_dashboard/config.py
"""
Centralized Configuration Management

Version: 1.0.0
Features:
- Local .env loading via python-dotenv
- Singleton pattern for efficiency
- Type-safe getters with defaults
- Logging setup shared by every entry point
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Optional

# Initialize logger
logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == "true"


class Config:
    """
    Centralized configuration management
    
    Usage:
        from kpi_dashboard.config import config
        
        # Get app settings
        threshold = config.get_app_setting("HIGH_PERFORMANCE_THRESHOLD", 80)
        
        # Check feature flags
        if config.is_feature_enabled("TEHRAN_CONTEXT"):
            ...
    """
    
    _instance = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        if self._initialized:
            return
        
        self._load_config()
        self._initialized = True
    
    def _load_config(self):
        """Load configuration from .env and the process environment"""
        self._load_env_file()
        self._load_app_config()
        self._log_config_status()
    
    def _load_env_file(self):
        """Find and load .env file"""
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]
        
        self._env_path: Optional[Path] = None
        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                self._env_path = env_path
                logger.info(f"Loaded .env from: {env_path}")
                break
    
    def _load_app_config(self):
        """Load application-specific settings"""
        self._app_config = {
            # Logging
            "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
            
            # Scoring
            "HIGH_PERFORMANCE_THRESHOLD": float(os.getenv("HIGH_PERFORMANCE_THRESHOLD", "80")),
            "LOW_PERFORMANCE_THRESHOLD": float(os.getenv("LOW_PERFORMANCE_THRESHOLD", "50")),
            "TREND_PERIODS": int(os.getenv("TREND_PERIODS", "6")),
            
            # Targeting
            "DEFAULT_ACQUISITION_RATE": float(os.getenv("DEFAULT_ACQUISITION_RATE", "10")),
            "DEFAULT_YEAR": int(os.getenv("DEFAULT_YEAR", "1404")),
            
            # Feature flags
            "ENABLE_TEHRAN_CONTEXT": _env_bool("ENABLE_TEHRAN_CONTEXT", "true"),
            "ENABLE_DEBUG_MODE": _env_bool("ENABLE_DEBUG_MODE", "false"),
        }
    
    def _log_config_status(self):
        """Log configuration status"""
        logger.info(f"✅ Env file: {self._env_path or 'Not found'}")
        logger.info(f"✅ Default year: {self._app_config['DEFAULT_YEAR']}")
        logger.info(f"✅ Tehran context: {'Enabled' if self._app_config['ENABLE_TEHRAN_CONTEXT'] else 'Disabled'}")
    
    # ==================== PUBLIC GETTERS ====================
    
    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)
    
    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return self._app_config.get(key, True)
    
    def reload(self):
        """Re-read .env and environment variables"""
        self._load_config()
    
    # ==================== PROPERTIES ====================
    
    @property
    def app_config(self) -> Dict[str, Any]:
        return self._app_config.copy()


def configure_logging(level: Optional[str] = None):
    """Apply the shared log format at the configured level."""
    level = level or config.get_app_setting("LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# ==================== SINGLETON INSTANCE ====================

config = Config()

# ==================== BACKWARD COMPATIBILITY EXPORTS ====================

APP_CONFIG = config.app_config

__all__ = [
    'config',
    'Config',
    'APP_CONFIG',
    'configure_logging',
    'LOG_FORMAT',
]
