# ============================================================================
# MODULE CONTEXT - CSAPI ENDPOINT CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - fixture-backed CSAPI HTTP endpoints
# PURPOSE: Environment-based configuration for the csapi_api module
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: CSAPIServerConfig, get_server_config
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# ============================================================================

"""
CSAPI Endpoint Configuration

Environment Variables:
    Optional:
    - CSAPI_SERVER_TITLE: Landing page title (default: "Connected Systems API")
    - CSAPI_SERVER_DESCRIPTION: Landing page description
    - CSAPI_SERVER_BASE_URL: Base URL for links (default: auto-detect)
    - CSAPI_FIXTURE_DIR: Directory of fixture JSON served by the endpoints

Date: 19 OCT 2026
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from csapi.config import DEFAULT_FIXTURE_DIR


class CSAPIServerConfig(BaseModel):
    """csapi_api module configuration - fully configurable via environment variables."""

    title: str = Field(
        default_factory=lambda: os.getenv("CSAPI_SERVER_TITLE", "Connected Systems API"),
        description="Landing page title"
    )

    description: str = Field(
        default_factory=lambda: os.getenv(
            "CSAPI_SERVER_DESCRIPTION",
            "Fixture-backed OGC API - Connected Systems endpoints"
        ),
        description="Landing page description"
    )

    base_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("CSAPI_SERVER_BASE_URL"),
        description="Base URL for links (auto-detected if None)"
    )

    fixture_dir: str = Field(
        default_factory=lambda: os.getenv("CSAPI_FIXTURE_DIR", DEFAULT_FIXTURE_DIR),
        description="Directory of fixture JSON documents"
    )

    route_prefix: str = Field(
        default="api/csapi",
        description="Route prefix under the Function App host"
    )

    def get_api_root(self, request_url: Optional[str] = None) -> str:
        """
        API root used in response links.

        Args:
            request_url: Current request URL for auto-detection

        Returns:
            Configured base URL, or the request's scheme+host, plus the route prefix
        """
        if self.base_url:
            base = self.base_url.rstrip("/")
        elif request_url and f"/{self.route_prefix}" in request_url:
            base = request_url.split(f"/{self.route_prefix}")[0]
        else:
            base = "http://localhost:7071"  # Local development fallback
        return f"{base}/{self.route_prefix}"


# Singleton instance cache
_server_config_cache: Optional[CSAPIServerConfig] = None


def get_server_config() -> CSAPIServerConfig:
    """
    Get csapi_api configuration (singleton pattern).

    Returns:
        Cached configuration instance
    """
    global _server_config_cache

    if _server_config_cache is None:
        _server_config_cache = CSAPIServerConfig()

    return _server_config_cache


def reset_server_config() -> None:
    """Forget the cached configuration (next call re-reads the environment)."""
    global _server_config_cache
    _server_config_cache = None
