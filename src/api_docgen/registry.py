"""Endpoint registry.

Services register one :class:`EndpointRecord` per route at start-up, passing
example values or types for request and response bodies purely so their
shape can be reflected. Request handling itself stays with the service's own
web framework; a registered ``handler`` is kept for introspection only.
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api_docgen.utils.rwlock import RWLock

logger = logging.getLogger(__name__)


class ServiceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    version: str = ""
    description: str = ""
    base_url: str = ""


class EndpointRecord(BaseModel):
    """Documentation metadata for a single route."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str  # /api/users/{id}
    summary: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    request_body: Any = None  # type or example value, reflected
    responses: Mapping[int, Any] = Field(default_factory=dict, validate_default=True)  # {status_code: type | example | "description"}
    security: tuple[str, ...] = ()  # scheme names, e.g. ("mTLS", "Bearer")
    handler: Callable[..., Any] | None = None
    operation_id: str = ""

    @field_validator("responses")
    @classmethod
    def _freeze_responses(cls, value: Mapping[int, Any]) -> Mapping[int, Any]:
        return MappingProxyType(dict(value))


class RegistrySnapshot(NamedTuple):
    info: ServiceInfo
    endpoints: tuple[EndpointRecord, ...]


class EndpointRegistry:
    """Append-only collection of endpoint records plus the service info.

    Writers take the exclusive side of a reader/writer lock, readers the
    shared side; readers only ever see immutable snapshots.
    """

    def __init__(self) -> None:
        self._lock = RWLock()
        self._endpoints: list[EndpointRecord] = []
        self._info = ServiceInfo()

    def set_service_info(self, title: str, version: str, description: str = "", base_url: str = "") -> None:
        info = ServiceInfo(title=title, version=version, description=description, base_url=base_url)
        with self._lock.exclusive():
            self._info = info

    def register_endpoint(self, record: EndpointRecord) -> EndpointRecord:
        with self._lock.exclusive():
            self._endpoints.append(record)
        logger.debug("registered %s %s", record.method, record.path)
        return record

    def route(self, method: str, path: str, **metadata: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering the decorated handler under ``method path``.

        The summary defaults to the first line of the handler's docstring.
        """

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            doc = inspect.getdoc(handler) or ""
            fields = {"summary": doc.splitlines()[0] if doc else "", **metadata}
            self.register_endpoint(EndpointRecord(method=method, path=path, handler=handler, **fields))
            return handler

        return decorator

    def list_endpoints(self) -> tuple[EndpointRecord, ...]:
        with self._lock.shared():
            return tuple(self._endpoints)

    @property
    def service_info(self) -> ServiceInfo:
        with self._lock.shared():
            return self._info

    def snapshot(self) -> RegistrySnapshot:
        with self._lock.shared():
            return RegistrySnapshot(self._info, tuple(self._endpoints))

    def __len__(self) -> int:
        with self._lock.shared():
            return len(self._endpoints)
