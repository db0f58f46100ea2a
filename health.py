# ============================================================================
# MODULE CONTEXT - HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core Infrastructure - Health Monitoring
# PURPOSE: Health checks for the CSAPI endpoints and client configuration
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_public_health, get_detailed_health, get_app_identity, HealthStatus
# DEPENDENCIES: httpx, csapi.config, csapi.util_logger
# PATTERNS: Two-tier health checks (public/detailed) for APIM
# ============================================================================

"""
Health Check Module

Provides two-tier health monitoring:

1. Public Health (/api/health):
   - Minimal response for external callers
   - Returns only status and timestamp
   - Always returns 200 (status in body indicates health)

2. Detailed Health (/api/health/detailed):
   - Fixture directory availability (critical)
   - Endpoint registry coverage against fixtures (non-critical)
   - Live CSAPI reachability when CSAPI_LIVE is set (non-critical)
   - API module status (non-critical)
   - Returns 503 if unhealthy

Usage:
    from health import get_public_health, get_detailed_health

    result = get_public_health()
    # {"status": "healthy", "timestamp": "2026-10-19T12:00:00Z"}
"""

import time
import uuid
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Dict, Any

import httpx

from csapi.config import get_csapi_config
from csapi.util_logger import LoggerFactory, ComponentType

# Create module logger
logger = LoggerFactory.create_logger(ComponentType.SERVICE, "HealthService")

APP_NAME = "csapi-client"
APP_DESCRIPTION = "OGC API - Connected Systems Client"


# ============================================================================
# Health Status Enum
# ============================================================================

class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"      # Non-critical components failing
    UNHEALTHY = "unhealthy"    # Critical components failing


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class CheckResult:
    """Result of a single health check."""
    status: str              # "pass" or "fail"
    latency_ms: float        # Time taken for check
    message: str             # Human-readable status message
    details: Optional[Dict[str, Any]] = None  # Additional details

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result = {
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


def get_app_identity() -> Dict[str, str]:
    """Name and description used in startup logs and detailed health."""
    return {"name": APP_NAME, "description": APP_DESCRIPTION}


# ============================================================================
# Health Check Functions
# ============================================================================

def check_fixture_directory() -> CheckResult:
    """
    Check that the fixture directory served by the endpoints exists.

    Critical check - failure means UNHEALTHY status.
    """
    from csapi.fixtures import FixtureLoader
    from csapi_api.config import get_server_config

    start_time = time.perf_counter()

    loader = FixtureLoader(get_server_config().fixture_dir)
    if not loader.fixture_dir.is_dir():
        return CheckResult(
            status="fail",
            latency_ms=(time.perf_counter() - start_time) * 1000,
            message="Fixture directory does not exist",
            details={"fixture_dir": str(loader.fixture_dir)}
        )

    fixture_count = len(list(loader.fixture_dir.glob("*.json")))
    return CheckResult(
        status="pass",
        latency_ms=(time.perf_counter() - start_time) * 1000,
        message=f"{fixture_count} fixtures available",
        details={"fixture_dir": str(loader.fixture_dir), "fixture_count": fixture_count}
    )


def check_endpoint_registry() -> CheckResult:
    """
    Check which canonical collections have a fixture.

    Non-critical check - missing collections mean DEGRADED status.
    """
    from csapi.client import RESOURCE_KINDS
    from csapi.endpoints import CANONICAL_ENDPOINTS, ResourceType
    from csapi.fixtures import FixtureLoader
    from csapi_api.config import get_server_config

    start_time = time.perf_counter()

    loader = FixtureLoader(get_server_config().fixture_dir)
    missing = [
        name for name in CANONICAL_ENDPOINTS
        if not loader.exists(RESOURCE_KINDS[ResourceType(name)].fixture_key)
    ]

    return CheckResult(
        status="fail" if missing else "pass",
        latency_ms=(time.perf_counter() - start_time) * 1000,
        message=f"{len(CANONICAL_ENDPOINTS) - len(missing)}/{len(CANONICAL_ENDPOINTS)} collections backed by fixtures",
        details={"missing": missing} if missing else None
    )


def check_live_api(timeout_seconds: float = 5.0) -> CheckResult:
    """
    Check that the configured CSAPI root answers its landing page.

    Non-critical check - only meaningful when CSAPI_LIVE is set.
    """
    config = get_csapi_config()
    start_time = time.perf_counter()

    try:
        response = httpx.get(
            config.api_root,
            headers={"Accept": "application/json"},
            timeout=timeout_seconds,
            follow_redirects=True
        )
        latency_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code >= 400:
            return CheckResult(
                status="fail",
                latency_ms=latency_ms,
                message=f"CSAPI returned HTTP {response.status_code}",
                details={"api_root": config.api_root}
            )

        return CheckResult(
            status="pass",
            latency_ms=latency_ms,
            message="CSAPI landing page reachable",
            details={"api_root": config.api_root}
        )

    except httpx.HTTPError as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Live CSAPI check failed: {e}")

        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"CSAPI unreachable: {type(e).__name__}",
            details={"api_root": config.api_root, "error": str(e)}
        )


def check_api_modules() -> CheckResult:
    """
    Check that the csapi_api module can be imported.

    Non-critical check - failure means DEGRADED status.
    """
    start_time = time.perf_counter()

    try:
        from csapi_api import get_csapi_triggers
        triggers = get_csapi_triggers()
        return CheckResult(
            status="pass",
            latency_ms=(time.perf_counter() - start_time) * 1000,
            message="All modules loaded",
            details={"csapi_api": {"available": True, "endpoints": len(triggers)}}
        )
    except Exception as e:
        return CheckResult(
            status="fail",
            latency_ms=(time.perf_counter() - start_time) * 1000,
            message="No API modules available",
            details={"csapi_api": {"available": False, "error": str(e)}}
        )


# ============================================================================
# Main Entry Points
# ============================================================================

def get_public_health() -> Dict[str, Any]:
    """
    Get minimal health status for public endpoint.

    Returns:
        Dict with status and timestamp only
    """
    start_time = time.perf_counter()

    fixture_result = check_fixture_directory()
    status = HealthStatus.HEALTHY if fixture_result.status == "pass" else HealthStatus.UNHEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Public health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'public'
        }
    })

    return {
        "status": status.value,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_detailed_health() -> Dict[str, Any]:
    """
    Get detailed health status for probes and operations.

    SECURITY NOTE: Block this endpoint from external access via APIM policy.

    Returns:
        Dict with per-check results and overall status
    """
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())[:8]
    config = get_csapi_config()

    checks = {}
    critical_failures = []
    non_critical_failures = []

    # Critical: fixtures served by the endpoints
    fixture_result = check_fixture_directory()
    checks["fixtures"] = fixture_result.to_dict()
    if fixture_result.status == "fail":
        critical_failures.append("fixtures")

    registry_result = check_endpoint_registry()
    checks["endpoint_registry"] = registry_result.to_dict()
    if registry_result.status == "fail":
        non_critical_failures.append("endpoint_registry")

    if config.live:
        live_result = check_live_api(timeout_seconds=config.timeout_seconds)
        checks["live_api"] = live_result.to_dict()
        if live_result.status == "fail":
            non_critical_failures.append("live_api")

    modules_result = check_api_modules()
    checks["api_modules"] = modules_result.to_dict()
    if modules_result.status == "fail":
        non_critical_failures.append("api_modules")

    if critical_failures:
        status = HealthStatus.UNHEALTHY
    elif non_critical_failures:
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Detailed health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'detailed',
            'request_id': request_id,
            'critical_failures': critical_failures,
            'non_critical_failures': non_critical_failures
        }
    })

    identity = get_app_identity()
    return {
        "status": status.value,
        "app": identity["name"],
        "description": identity["description"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "mode": "client" if config.client_mode else ("live" if config.live else "fixture"),
        "checks": checks,
        "total_duration_ms": round(total_duration, 2)
    }
