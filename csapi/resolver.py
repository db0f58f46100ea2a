# ============================================================================
# MODULE CONTEXT - DATA RESOLUTION LAYER
# ============================================================================
# STATUS: Resolver Layer - Chooses fixture, live fetch or direct client call
# PURPOSE: Hand the filtering core a resolved JSON value, whatever its source
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ResolutionMode, DataResolver
# DEPENDENCIES: httpx (via csapi.client), config, util_logger
# PATTERNS: Explicit handler table built at construction, explicit fixture cache
# ============================================================================

"""
Data Resolution Layer.

Resolution order for resolve(name, live_url):

    1. client mode (CSAPI_CLIENT_MODE=true)
         -> handler registered for the fixture name (e.g. "systems",
            "endpoint_systems") lists the collection through a direct
            ResourceClient. No handler, or a failing handler, falls through.
    2. live mode (CSAPI_LIVE=true) and live_url given
         -> HTTP GET live_url
    3. otherwise
         -> fixture JSON through the FixtureLoader and its FixtureCache

Missing fixtures and unreachable live endpoints are hard failures
(FixtureNotFoundError / CSAPIRequestError). A payload that normalizes to no
records is logged here, since the normalizer itself never complains.
"""

from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Optional

import httpx

from .config import CSAPIConfig, get_csapi_config
from .util_logger import LoggerFactory, ComponentType

from .client import RESOURCE_KINDS, ResourceKind, ResourceClient, HTTPClientMixin, fetch_json
from .endpoints import ResourceType, build_csapi_url
from .exceptions import CSAPIError
from .fixtures import FixtureLoader
from .models import CSAPIRecord
from .normalizer import RECORD_MAPPERS, normalize, normalize_records
from .validation import is_feature_collection, is_resource_collection

logger = LoggerFactory.create_logger(ComponentType.RESOLVER, "DataResolver")


class ResolutionMode(str, Enum):
    """Where resolved data comes from (highest precedence first)."""
    CLIENT = "client"
    LIVE = "live"
    FIXTURE = "fixture"


class DataResolver(HTTPClientMixin):
    """
    Resolves fixture names / live URLs to parsed JSON.

    Usage:
        resolver = DataResolver()                         # modes from environment
        resolver = DataResolver(live=True, api_root="https://h")
        data = resolver.resolve("systems", "https://h/systems")
        systems = resolver.resolve_records(ResourceType.SYSTEMS)
    """

    def __init__(
        self,
        config: Optional[CSAPIConfig] = None,
        loader: Optional[FixtureLoader] = None,
        http_client: Optional[httpx.Client] = None,
        live: Optional[bool] = None,
        client_mode: Optional[bool] = None,
        api_root: Optional[str] = None
    ):
        """
        Args:
            config: Configuration; get_csapi_config() when omitted
            loader: Fixture loader; one over config.fixture_dir when omitted
            http_client: httpx.Client shared by live fetches and client handlers
            live: Override config.live
            client_mode: Override config.client_mode
            api_root: Override config.api_root
        """
        self.config = config or get_csapi_config()
        self.loader = loader or FixtureLoader(self.config.fixture_dir)
        self.live = self.config.live if live is None else live
        self.client_mode = self.config.client_mode if client_mode is None else client_mode
        self.api_root = (api_root or self.config.api_root).rstrip("/")
        self._init_http(http_client, self.config.timeout_seconds)
        self._handlers: Dict[str, Callable[[], Any]] = self._build_handlers()

    @property
    def mode(self) -> ResolutionMode:
        if self.client_mode:
            return ResolutionMode.CLIENT
        if self.live:
            return ResolutionMode.LIVE
        return ResolutionMode.FIXTURE

    def _build_handlers(self) -> Dict[str, Callable[[], Any]]:
        """Fixture name -> direct client call, for every resource kind."""
        handlers: Dict[str, Callable[[], Any]] = {}
        for kind in RESOURCE_KINDS.values():
            handler = partial(self._list_with_client, kind)
            handlers[kind.fixture_key] = handler
            handlers[f"endpoint_{kind.collection}"] = handler
        return handlers

    def _list_with_client(self, kind: ResourceKind) -> Any:
        client = ResourceClient(kind, self.api_root, http_client=self._get_client())
        return client.list_raw()

    def has_handler(self, name: str) -> bool:
        return name in self._handlers

    def resolve(self, name: str, live_url: Optional[str] = None) -> Any:
        """
        Resolve a fixture name (and optional live URL) to parsed JSON.

        Raises:
            FixtureNotFoundError: Fixture fallback has no such file
            CSAPIRequestError: Live fetch failed
        """
        if self.client_mode:
            handler = self._handlers.get(name)
            if handler is None:
                logger.debug(f"No client handler for {name!r}; falling back")
            else:
                try:
                    return handler()
                except CSAPIError as e:
                    logger.warning(
                        f"Client invocation failed for {name!r}: {e}; falling back",
                        exc_info=True
                    )

        if self.live and live_url:
            logger.debug(f"Live fetch: {live_url}")
            return fetch_json(self._get_client(), live_url)

        return self.loader.cached(name)

    def resolve_records(self, resource_type: ResourceType) -> List[CSAPIRecord]:
        """
        Resolve a collection and normalize it into typed records.

        Raises:
            ValueError: If the resource type has no record shape
        """
        if resource_type not in RECORD_MAPPERS:
            raise ValueError(f"No record mapping for resource type: {resource_type.value}")
        kind = RESOURCE_KINDS[resource_type]
        raw = self.resolve(kind.fixture_key, build_csapi_url(resource_type, self.api_root))
        records = normalize_records(raw, resource_type)

        if not records:
            plural_key, _ = RECORD_MAPPERS[resource_type]
            items = normalize(raw, plural_key)
            if items:
                reason = f"{len(items)} items but none with an id"
            elif is_feature_collection(raw) or is_resource_collection(raw) or raw == []:
                reason = None
            else:
                reason = "unrecognized payload shape"
            if reason:
                logger.warning(
                    f"{resource_type.value}: payload normalized to no records ({reason})",
                    extra={'custom_dimensions': {
                        'resource_type': resource_type.value,
                        'mode': self.mode.value,
                        'payload_type': type(raw).__name__
                    }}
                )
        return records

    def invalidate(self, name: Optional[str] = None) -> None:
        """Drop one cached fixture, or the whole fixture cache."""
        if name is None:
            self.loader.cache.clear()
        else:
            self.loader.cache.invalidate(name)
