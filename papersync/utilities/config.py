"""Configuration management for the PaperSync service."""
import os
from typing import Final
from pathlib import Path

# Load environment variables from .env file if it exists
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# Vault defaults (request options override these)
VAULT_METHOD: Final[str] = os.getenv('PAPERSYNC_VAULT_METHOD', 'local')
VAULT_PATH: Final[str] = os.getenv('PAPERSYNC_VAULT_PATH', '')
GITHUB_TOKEN: Final[str] = os.getenv('PAPERSYNC_GITHUB_TOKEN', '')
GITHUB_REPO: Final[str] = os.getenv('PAPERSYNC_GITHUB_REPO', '')
GITHUB_API_URL: Final[str] = os.getenv('PAPERSYNC_GITHUB_API_URL', 'https://api.github.com')

# Scanner / network timings, in seconds
DISCOVERY_TIMEOUT: Final[float] = float(os.getenv('PAPERSYNC_DISCOVERY_TIMEOUT', '10.0'))
SCAN_POLL_DELAY: Final[float] = float(os.getenv('PAPERSYNC_SCAN_POLL_DELAY', '2.0'))
HTTP_TIMEOUT: Final[float] = float(os.getenv('PAPERSYNC_HTTP_TIMEOUT', '30.0'))

# Event feed
MAX_EVENTS: Final[int] = int(os.getenv('PAPERSYNC_MAX_EVENTS', '300'))
