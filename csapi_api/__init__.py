"""
CSAPI Endpoint Module

Serves fixture data as OGC API - Connected Systems endpoints, applying the
advanced filtering query parameters. Used as a local stand-in for a live
CSAPI server.

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

from .triggers import get_csapi_triggers
from .config import get_server_config

__all__ = ['get_csapi_triggers', 'get_server_config']
