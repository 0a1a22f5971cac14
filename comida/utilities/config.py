"""Configuration management for the ComidaACasa application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Generation gateway (OpenAI)
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
OPENAI_MODEL: Final[str] = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
OPENAI_TIMEOUT: Final[float] = float(os.getenv('OPENAI_TIMEOUT', '60'))

# Session gateway: shared access code checked by the identity provider
COMIDA_ACCESS_CODE: Final[str] = os.getenv('COMIDA_ACCESS_CODE', '')

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# Menu generation limits
DEFAULT_MENU_DAYS: Final[int] = int(os.getenv('DEFAULT_MENU_DAYS', '7'))
MAX_MENU_DAYS: Final[int] = int(os.getenv('MAX_MENU_DAYS', '14'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('COMIDA_DATA_DIR', str(BASE_DIR / 'data')))
TEMPLATES_DIR: Final[Path] = BASE_DIR / 'templates'


def is_configured(api_key: str = OPENAI_API_KEY, access_code: str = COMIDA_ACCESS_CODE) -> bool:
    """True when both the generation and session credentials are present."""
    return bool(api_key) and bool(access_code)
