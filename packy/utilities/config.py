"""Configuration management for the Packy application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Undo history capacity (number of snapshots kept by a store)
HISTORY_LIMIT: Final[int] = int(os.getenv('HISTORY_LIMIT', '50'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
CONFIG_DIR: Final[Path] = Path(os.getenv('PACKY_CONFIG_DIR', str(BASE_DIR / 'config')))
EXPORT_DIR: Final[Path] = Path(os.getenv('PACKY_EXPORT_DIR', str(Path.cwd() / 'exports')))
