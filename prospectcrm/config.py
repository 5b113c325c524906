"""
Prospect CRM Configuration
Loads settings from environment variables with sensible defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

# Load .env file
PROJECT_ROOT = Path(__file__).parent.parent
env_path = PROJECT_ROOT / '.env'
load_dotenv(env_path)


class Config:
    """Application configuration."""

    # Demo mode store: one JSON file standing in for browser localStorage
    DEMO_STORE_PATH = Path(os.getenv('CRM_DEMO_STORE', str(PROJECT_ROOT / 'data' / 'demo_store.json')))

    # Remote service
    REQUEST_TIMEOUT = float(os.getenv('CRM_REQUEST_TIMEOUT', '15'))
    DOCUMENTS_BUCKET = os.getenv('CRM_DOCUMENTS_BUCKET', 'crm-documents')
    CONTRACTS_BUCKET = os.getenv('CRM_CONTRACTS_BUCKET', 'contract-documents')


# Singleton instance
config = Config()


# =============================================================================
# BACKEND MODE SELECTION
# =============================================================================

@dataclass(frozen=True)
class BackendSettings:
    service_url: str
    service_key: str

    @property
    def remote_enabled(self) -> bool:
        return bool(self.service_url) and bool(self.service_key)


def load_backend_settings() -> BackendSettings:
    """
    Read the remote service credentials from the environment.

    Called on every data access, never cached: changing CRM_SERVICE_URL or
    CRM_SERVICE_KEY takes effect on the next call. Missing values are not an
    error, they simply select demo mode.
    """
    url = (os.getenv('CRM_SERVICE_URL') or '').strip()
    key = (os.getenv('CRM_SERVICE_KEY') or '').strip()
    if not url or not key:
        _logger.debug("Remote service not configured (url=%s, key=%s)", bool(url), bool(key))
    return BackendSettings(service_url=url.rstrip('/'), service_key=key)
