"""
CSAPI HTTP Triggers

Azure Functions HTTP handlers for the fixture-backed Connected Systems endpoints.

Endpoints:
- GET /api/csapi - Landing page (advertises canonical endpoints)
- GET /api/csapi/conformance - Conformance classes
- GET /api/csapi/{collection} - Collection (filterable via CSAPI query parameters)
- GET /api/csapi/{collection}/{item_id} - Item detail
- GET /api/csapi/systems/{system_id}/events - Events of a system

Integration (in function_app.py):
    from csapi_api import get_csapi_triggers

    for trigger in get_csapi_triggers():
        app.route(
            route=trigger['route'],
            methods=trigger['methods'],
            auth_level=func.AuthLevel.ANONYMOUS
        )(trigger['handler'])

Date: 19 OCT 2026
"""

import azure.functions as func
import json
import logging
from typing import Dict, Any, List

from pydantic import ValidationError

from csapi.exceptions import FixtureNotFoundError, ResourceNotFoundError

from .config import get_server_config
from .service import CSAPIFixtureService

logger = logging.getLogger(__name__)


# ============================================================================
# TRIGGER REGISTRY FUNCTION
# ============================================================================

def get_csapi_triggers() -> List[Dict[str, Any]]:
    """
    Get list of CSAPI trigger configurations for function_app.py.

    Returns:
        List of dicts with keys:
        - route: URL route pattern
        - methods: List of HTTP methods
        - handler: Callable trigger handler
    """
    return [
        {
            'route': 'csapi',
            'methods': ['GET'],
            'handler': CSAPILandingPageTrigger().handle
        },
        {
            'route': 'csapi/conformance',
            'methods': ['GET'],
            'handler': CSAPIConformanceTrigger().handle
        },
        {
            'route': 'csapi/{collection}',
            'methods': ['GET'],
            'handler': CSAPICollectionTrigger().handle
        },
        {
            'route': 'csapi/{collection}/{item_id}',
            'methods': ['GET'],
            'handler': CSAPIItemTrigger().handle
        },
        {
            'route': 'csapi/systems/{system_id}/events',
            'methods': ['GET'],
            'handler': CSAPISystemEventsTrigger().handle
        }
    ]


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseCSAPITrigger:
    """
    Base class for CSAPI triggers.

    Provides common functionality:
    - API root extraction from request
    - JSON response formatting
    - Error mapping (404 / 400 / 500)
    """

    def __init__(self):
        """Initialize trigger with service."""
        self.config = get_server_config()
        self.service = CSAPIFixtureService(self.config)

    def _get_api_root(self, req: func.HttpRequest) -> str:
        return self.config.get_api_root(req.url)

    def _json_response(
        self,
        data: Any,
        status_code: int = 200,
        content_type: str = "application/json"
    ) -> func.HttpResponse:
        """
        Create JSON HTTP response.

        Args:
            data: Data to serialize (dict or Pydantic model)
            status_code: HTTP status code
            content_type: Response content type
        """
        if hasattr(data, 'model_dump'):
            data = data.model_dump(mode='json', exclude_none=True)

        return func.HttpResponse(
            body=json.dumps(data, indent=2),
            status_code=status_code,
            mimetype=content_type
        )

    def _error_response(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "BadRequest"
    ) -> func.HttpResponse:
        """
        Create error response with {"code", "description"} body.
        """
        error_body = {
            "code": error_type,
            "description": message
        }
        return func.HttpResponse(
            body=json.dumps(error_body, indent=2),
            status_code=status_code,
            mimetype="application/json"
        )

    def _exception_response(self, e: Exception, action: str) -> func.HttpResponse:
        """Map an exception raised while serving a request to an error response."""
        if isinstance(e, (ResourceNotFoundError, FixtureNotFoundError)):
            logger.warning(f"{action}: not found: {e}")
            return self._error_response(str(e), status_code=404, error_type="NotFound")
        if isinstance(e, (ValidationError, ValueError)):
            logger.warning(f"{action}: invalid request: {e}")
            return self._error_response(str(e), status_code=400, error_type="BadRequest")
        logger.error(f"Error {action}: {e}", exc_info=True)
        return self._error_response(str(e), status_code=500, error_type="InternalServerError")


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class CSAPILandingPageTrigger(BaseCSAPITrigger):
    """
    Landing page trigger.

    Endpoint: GET /api/csapi
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            logger.info("CSAPI landing page requested")
            landing = self.service.get_landing_page(self._get_api_root(req))
            return self._json_response(landing)
        except Exception as e:
            return self._exception_response(e, "generating landing page")


class CSAPIConformanceTrigger(BaseCSAPITrigger):
    """
    Conformance classes trigger.

    Endpoint: GET /api/csapi/conformance
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            logger.info("CSAPI conformance requested")
            return self._json_response(self.service.get_conformance())
        except Exception as e:
            return self._exception_response(e, "generating conformance")


class CSAPICollectionTrigger(BaseCSAPITrigger):
    """
    Collection trigger.

    Endpoint: GET /api/csapi/{collection}
    Query params: id, parent, system, procedure, foi, observedProperty,
                  controlledProperty, baseProperty, objectType, q
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """
        Handle collection request.

        Returns:
            FeatureCollection (application/geo+json) or Collection JSON response
        """
        try:
            collection = req.route_params.get('collection')
            if not collection:
                return self._error_response(
                    message="collection is required",
                    status_code=400,
                    error_type="BadRequest"
                )

            logger.info(f"CSAPI collection requested: {collection}, params={dict(req.params)}")

            data = self.service.get_collection(collection, self._get_api_root(req), req.params)

            if data["type"] == "Collection":
                logger.info(f"Returning {len(data['members'])} {collection} members")
                return self._json_response(data)

            logger.info(f"Returning {len(data['features'])} {collection} features")
            return self._json_response(data, content_type="application/geo+json")

        except Exception as e:
            return self._exception_response(e, "processing collection request")


class CSAPIItemTrigger(BaseCSAPITrigger):
    """
    Item detail trigger.

    Endpoint: GET /api/csapi/{collection}/{item_id}
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            collection = req.route_params.get('collection')
            item_id = req.route_params.get('item_id')

            if not collection:
                return self._error_response("collection is required")
            if not item_id:
                return self._error_response("item_id is required")

            logger.info(f"CSAPI item requested: {collection}/{item_id}")

            item = self.service.get_item(collection, item_id, self._get_api_root(req))
            content_type = "application/geo+json" if item.get("type") == "Feature" else "application/json"
            return self._json_response(item, content_type=content_type)

        except Exception as e:
            return self._exception_response(e, "processing item request")


class CSAPISystemEventsTrigger(BaseCSAPITrigger):
    """
    Nested system events trigger.

    Endpoint: GET /api/csapi/systems/{system_id}/events
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        try:
            system_id = req.route_params.get('system_id')
            if not system_id:
                return self._error_response("system_id is required")

            logger.info(f"CSAPI system events requested: {system_id}")

            events = self.service.get_system_events(system_id, self._get_api_root(req))
            return self._json_response(events, content_type="application/geo+json")

        except Exception as e:
            return self._exception_response(e, "processing system events request")
