"""Configuration loading and validation for CookMate."""

import os
import logging
from typing import Dict, List, Optional
from pathlib import Path
from dotenv import load_dotenv
from rich.logging import RichHandler

# Project root (the directory holding pyproject.toml)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / '.env')

DEFAULT_GEMINI_MODEL = 'gemini-2.0-flash-001'
DEFAULT_FALLBACK_MODELS = ['gemini-1.5-flash', 'gemini-1.5-pro']


def _split_list(value: Optional[str], default: List[str]) -> List[str]:
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


def load_config() -> Dict:
    """Load configuration from environment variables."""
    def resolve_path(path: Optional[str], default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Generation
        'gemini_api_key': os.getenv('GEMINI_API_KEY'),
        'gemini_model': os.getenv('GEMINI_MODEL', DEFAULT_GEMINI_MODEL),
        'gemini_fallback_models': _split_list(os.getenv('GEMINI_FALLBACK_MODELS'), DEFAULT_FALLBACK_MODELS),

        # Video index (optional: without it every suggestion gets a search link)
        'youtube_api_key': os.getenv('YOUTUBE_API_KEY'),
        'youtube_max_results': int(os.getenv('YOUTUBE_MAX_RESULTS', '10')),
        'youtube_http_timeout_seconds': float(os.getenv('YOUTUBE_HTTP_TIMEOUT_SECONDS', '10')),

        # Request handling
        'request_timeout_seconds': float(os.getenv('REQUEST_TIMEOUT_SECONDS', '60')),

        # Storage
        'database_path': resolve_path(os.getenv('DATABASE_PATH'), 'cookmate.db'),

        # Server
        'host': os.getenv('HOST', '0.0.0.0'),
        'port': int(os.getenv('PORT', '3000')),
        'log_level': os.getenv('LOG_LEVEL', 'INFO'),
        'log_file': os.getenv('LOG_FILE'),
    }

    return config


def validate_config(config: Dict) -> List[str]:
    """Validate configuration and return list of errors."""
    errors = []

    if not config.get('gemini_api_key'):
        errors.append("GEMINI_API_KEY is required")

    max_results = config.get('youtube_max_results', 10)
    if not 1 <= max_results <= 50:
        errors.append("YOUTUBE_MAX_RESULTS must be between 1 and 50")

    if config.get('request_timeout_seconds', 60) <= 0:
        errors.append("REQUEST_TIMEOUT_SECONDS must be positive")

    database_path = config.get('database_path')
    if database_path:
        try:
            Path(database_path).parent.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            errors.append(f"Cannot create database directory: {e}")

    # YOUTUBE_API_KEY is optional: selection falls back to search links without it

    return errors


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Set up logging with Rich console output and an optional plain log file."""
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False
    )
    handlers: List[logging.Handler] = [rich_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=handlers,
        format="%(message)s"
    )

    noisy_loggers = [
        'httpx',
        'google_genai',
        'google_genai.models',
        'googleapiclient.discovery',
        'googleapiclient.discovery_cache',
        'urllib3.connectionpool',
        'uvicorn.access',
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
