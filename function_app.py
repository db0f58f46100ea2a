# ============================================================================
# MODULE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Main entry point for Azure Functions runtime serving CSAPI fixtures
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: app (FunctionApp instance)
# DEPENDENCIES: azure-functions, csapi_api
# ============================================================================

"""
Azure Functions Entry Point

Registers the fixture-backed OGC API - Connected Systems endpoints and
the health checks.

Architecture:
    - CSAPI: 5 endpoints serving fixture documents with advanced filtering
    - Health checks: 2 endpoints
        - /api/health - Public (minimal response for external callers)
        - /api/health/detailed - Internal (full checks for probes)

Deployment:
    - Local: func start
    - Tests point a client at http://localhost:7071/api/csapi with CSAPI_LIVE=true

Date: 19 OCT 2026
"""

import azure.functions as func
import json
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Azure Function App
app = func.FunctionApp()

# ============================================================================
# CSAPI - 5 Endpoints
# ============================================================================

try:
    from csapi_api import get_csapi_triggers

    logger.info("Registering CSAPI endpoints...")

    csapi_triggers = get_csapi_triggers()

    # Landing page
    @app.route(route="csapi", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def csapi_landing_page(req: func.HttpRequest) -> func.HttpResponse:
        return csapi_triggers[0]['handler'](req)

    # Conformance
    @app.route(route="csapi/conformance", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def csapi_conformance(req: func.HttpRequest) -> func.HttpResponse:
        return csapi_triggers[1]['handler'](req)

    # Collection (filterable)
    @app.route(route="csapi/{collection}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def csapi_collection(req: func.HttpRequest) -> func.HttpResponse:
        return csapi_triggers[2]['handler'](req)

    # Single item
    @app.route(route="csapi/{collection}/{item_id}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def csapi_item(req: func.HttpRequest) -> func.HttpResponse:
        return csapi_triggers[3]['handler'](req)

    # Events of a system
    @app.route(route="csapi/systems/{system_id}/events", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def csapi_system_events(req: func.HttpRequest) -> func.HttpResponse:
        return csapi_triggers[4]['handler'](req)

    logger.info("CSAPI registered successfully (5 endpoints)")

except ImportError as e:
    logger.warning(f"CSAPI module not available: {e}")
    logger.warning("CSAPI endpoints will not be available")

# ============================================================================
# Health Check Endpoints - 2 Endpoints (Public + Detailed)
# ============================================================================

@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """
    Public health check endpoint - minimal response for external callers.

    Always returns 200 - status in body indicates health.
    """
    from health import get_public_health

    result = get_public_health()

    return func.HttpResponse(
        json.dumps(result, default=str),
        mimetype="application/json",
        status_code=200,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


@app.route(route="health/detailed", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_detailed(req: func.HttpRequest) -> func.HttpResponse:
    """
    Detailed health check endpoint.

    Returns 503 if unhealthy, 200 otherwise (healthy or degraded).
    """
    from health import get_detailed_health, HealthStatus

    result = get_detailed_health()

    status_code = 503 if result["status"] == HealthStatus.UNHEALTHY.value else 200

    return func.HttpResponse(
        json.dumps(result, default=str, indent=2),
        mimetype="application/json",
        status_code=status_code,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )

# ============================================================================
# Application Startup
# ============================================================================

from health import get_app_identity
_app_identity = get_app_identity()

logger.info("="*60)
logger.info(f"{_app_identity['name']} - {_app_identity['description']}")
logger.info("="*60)
logger.info("Function App initialized successfully")
logger.info("Available endpoints:")
logger.info("  - GET /api/health - Public health check (minimal)")
logger.info("  - GET /api/health/detailed - Detailed health")
logger.info("")
logger.info("CSAPI (5 endpoints):")
logger.info("  - GET /api/csapi - Landing page")
logger.info("  - GET /api/csapi/conformance - Conformance")
logger.info("  - GET /api/csapi/{collection} - Collection (filterable)")
logger.info("  - GET /api/csapi/{collection}/{item_id} - Single item")
logger.info("  - GET /api/csapi/systems/{system_id}/events - System events")
logger.info("="*60)
