"""
BDL Site Configuration
Centralized configuration read from the environment (.env supported)
"""
import os
from dotenv import load_dotenv
from pathlib import Path

from bdl.core.exceptions import ConfigurationError

# Load from .env file with UTF-8 encoding (Windows compatibility)
env_path = Path(__file__).parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path, encoding='utf-8')

# =============================================================================
# Hosted Store Configuration
# =============================================================================
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
STORE_REST_PATH = os.getenv("STORE_REST_PATH", "/rest/v1")
STORE_TIMEOUT = int(os.getenv("STORE_TIMEOUT", "30"))

# =============================================================================
# Site Configuration
# =============================================================================
SITE_DOMAIN = os.getenv("SITE_DOMAIN", "bdl-saintandre.fr")
CALENDAR_NAME = os.getenv("CALENDAR_NAME", "Calendrier BDL – Lycée Saint-André")
CALENDAR_PRODID = os.getenv("CALENDAR_PRODID", "-//BDL Saint-André//Calendrier//FR")
CALENDAR_TIMEZONE = os.getenv("CALENDAR_TIMEZONE", "Europe/Paris")

# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL = os.getenv("BDL_LOG_LEVEL", "INFO")


def get_store_url() -> str:
    """
    Get the REST base URL of the hosted store.

    Raises:
        ConfigurationError: If SUPABASE_URL is not set
    """
    if not SUPABASE_URL:
        raise ConfigurationError("Store URL is not configured", config_key="SUPABASE_URL")
    return SUPABASE_URL.rstrip("/") + "/" + STORE_REST_PATH.strip("/")


def get_store_key() -> str:
    """Get the project API key used for every store request."""
    if not SUPABASE_ANON_KEY:
        raise ConfigurationError("Store API key is not configured", config_key="SUPABASE_ANON_KEY")
    return SUPABASE_ANON_KEY

