# ============================================================================
# MODULE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Centralized configuration for CSAPI data resolution (fixture/live/client)
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: CSAPIConfig, get_csapi_config
# DEPENDENCIES: pydantic-settings
# SOURCE: Environment variables (CSAPI_ prefix), optional .env file
# PATTERNS: Singleton pattern for config via lru_cache
# ============================================================================

"""
Application Configuration Module

Provides centralized configuration for the CSAPI client including:
- API root used by the canonical URL builders
- Data resolution mode switches (live fetch, direct client invocation)
- Fixture directory for the default (offline) mode
- HTTP timeout and logging verbosity

Resolution Modes:
    1. Fixture (default):
       - Loads JSON documents from CSAPI_FIXTURE_DIR
       - Use when: neither CSAPI_LIVE nor CSAPI_CLIENT_MODE is set

    2. Live:
       - Requires: CSAPI_LIVE=true
       - Fetches collections from CSAPI_API_ROOT over HTTP

    3. Client:
       - Requires: CSAPI_CLIENT_MODE=true
       - Calls the resource clients directly (takes precedence over live)

Usage:
    from csapi.config import get_csapi_config

    config = get_csapi_config()
    print(config.api_root)
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_API_ROOT = "https://example.csapi.server"
DEFAULT_FIXTURE_DIR = "fixtures/csapi/examples"


# ============================================================================
# Application Configuration
# ============================================================================

class CSAPIConfig(BaseSettings):
    """
    Client-wide configuration loaded from environment variables.

    Attributes:
        api_root: Root URL of the Connected Systems API
        live: Fetch from the live API instead of fixtures
        client_mode: Invoke resource clients directly
        fixture_dir: Directory holding fixture JSON documents
        timeout_seconds: HTTP request timeout
        debug_logging: Emit DEBUG level logs
    """

    model_config = SettingsConfigDict(
        env_prefix="CSAPI_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    api_root: str = Field(default=DEFAULT_API_ROOT, description="CSAPI root URL")
    live: bool = Field(default=False, description="Fetch live data over HTTP")
    client_mode: bool = Field(
        default=False,
        description="Resolve data by calling resource clients directly"
    )
    fixture_dir: str = Field(
        default=DEFAULT_FIXTURE_DIR,
        description="Fixture directory (relative paths resolve against cwd)"
    )
    timeout_seconds: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    debug_logging: bool = Field(default=False, description="Enable DEBUG logging")

    @field_validator("api_root")
    @classmethod
    def validate_api_root(cls, v: str) -> str:
        """Strip trailing slashes and reject empty roots."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("CSAPI_API_ROOT must not be empty")
        return v


@lru_cache(maxsize=1)
def get_csapi_config() -> CSAPIConfig:
    """
    Get singleton CSAPI configuration instance.

    Returns:
        CSAPIConfig: Validated configuration object

    Raises:
        ValidationError: If an environment variable has an invalid value
    """
    config = CSAPIConfig()
    logger.debug(
        f"CSAPI config loaded: api_root={config.api_root}, live={config.live}, "
        f"client_mode={config.client_mode}, fixture_dir={config.fixture_dir}"
    )
    return config
