"""HTTP-backed collections and records for the record picker."""

from typing import Any, Iterator, Optional

import httpx
import structlog

from recordpicker.config import get_settings
from recordpicker.errors import FetchError

logger = structlog.get_logger(__name__)


class ApiClient:
    """Async API client for the service backing remote collections."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout or settings.api_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.open()
        return self

    async def __aexit__(self, *args):
        await self.close()

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("ApiClient must be used as async context manager")
        return self._client

    async def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """GET ``path`` and decode the body, wrapping failures in FetchError."""
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"{e.request.method} {e.request.url} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {path}") from e

    def collection(self, path: str) -> "RemoteCollection":
        return RemoteCollection(self, path)

    def record(self, path: str) -> "RemoteRecord":
        return RemoteRecord(self, path)


class RemoteRecord:
    """A single resource at ``{path}/{id}``."""

    def __init__(self, api: ApiClient, path: str, attributes: Optional[dict] = None):
        self.api = api
        self.path = path.rstrip("/")
        self.attributes: dict[str, Any] = dict(attributes or {})

    def __repr__(self) -> str:
        return f"RemoteRecord({self.path!r}, id={self.attributes.get('id')!r})"

    def get(self, attribute: str) -> Any:
        return self.attributes.get(attribute)

    def set(self, attribute: str, value: Any, silent: bool = False) -> None:
        if not silent:
            logger.debug("Record attribute set", path=self.path, attribute=attribute)
        self.attributes[attribute] = value

    async def fetch(self) -> None:
        record_id = self.attributes.get("id")
        if record_id is None:
            raise FetchError(f"Cannot fetch a record from {self.path} without an id")

        data = await self.api.get_json(f"{self.path}/{record_id}")
        if not isinstance(data, dict):
            raise FetchError(f"Expected an object from {self.path}/{record_id}")
        self.attributes = data


class RemoteCollection:
    """
    A paged, filterable list at ``path``.

    ``fetch()`` sends the filters and the page size as query parameters and
    accepts either a JSON list or an object with an ``items`` list.
    """

    def __init__(self, api: ApiClient, path: str):
        self.api = api
        self.path = path.rstrip("/")
        self.filters: dict[str, Any] = {}
        self.page_size: Optional[int] = None
        self.records: list[RemoteRecord] = []

    def __iter__(self) -> Iterator[RemoteRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def set_filter(self, key: str, value: Any) -> None:
        if value is None:
            self.filters.pop(key, None)
        else:
            self.filters[key] = value

    def set_page_size(self, size: int) -> None:
        self.page_size = size

    def reset_pagination_state(self) -> None:
        """Forget filters and page size from any earlier listing."""
        self.filters.clear()
        self.page_size = None

    def _params(self) -> dict[str, Any]:
        params = dict(self.filters)
        if self.page_size is not None:
            params[get_settings().search_page_param] = self.page_size
        return params

    async def fetch(self) -> None:
        data = await self.api.get_json(self.path, params=self._params())

        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            raise FetchError(f"Expected a list of records from {self.path}")

        self.records = [
            RemoteRecord(self.api, self.path, item)
            for item in data
            if isinstance(item, dict)
        ]
        logger.debug("Collection fetched", path=self.path, count=len(self.records))
