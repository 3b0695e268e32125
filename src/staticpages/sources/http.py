"""Content source backed by a JSON HTTP API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field, HttpUrl

from .base import ContentRecord, ContentSource, PageView, snapshot

logger = logging.getLogger(__name__)


class HttpSourceConfig(BaseModel):
    """Settings read from ``[sources.http]``."""

    base_url: HttpUrl = Field(..., description="Root URL of the content API")
    api_token: Optional[str] = Field(None, description="Bearer token sent with every request")
    timeout: float = Field(30.0, description="Request timeout in seconds")


class HttpSource(ContentSource):
    """Read pages with ``GET {base_url}/pages/{type}/{name}?locale=`` and write them with ``PUT``."""

    name = "http"

    def __init__(self, *, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def set_config(self, config: Mapping[str, Any]) -> None:
        settings = HttpSourceConfig.model_validate(dict(config))
        headers = {"Accept": "application/json"}
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        self.close()
        self._client = httpx.Client(
            base_url=str(settings.base_url).rstrip("/") + "/",
            timeout=settings.timeout,
            headers=headers,
            transport=self._transport,
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            raise RuntimeError("HTTP content source used before set_config() was called")
        return self._client

    @staticmethod
    def _page_url(page_type: Optional[str], name: str) -> str:
        parts = [page_type, name] if page_type else [name]
        return "pages/" + "/".join(quote(part, safe="") for part in parts)

    def fetch(self, page_type: Optional[str], name: str, locale: str) -> Optional[ContentRecord]:
        response = self.client.get(self._page_url(page_type, name), params={"locale": locale})
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("HTTP source has no page %s.%s (%s)", page_type, name, locale)
            return None
        response.raise_for_status()
        data = response.json()
        return data or None

    def store(self, page: PageView, locale: str) -> bool:
        if not page.name:
            return False
        payload = _jsonable(snapshot(page, locale))
        response = self.client.put(
            self._page_url(page.page_type, page.name),
            params={"locale": locale},
            json=payload,
        )
        if not response.is_success:
            logger.warning(
                "Storing page %s (%s) failed with HTTP %s", page.key, locale, response.status_code
            )
        return response.is_success


def _jsonable(record: ContentRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, value in record.items():
        payload[key] = value.isoformat() if isinstance(value, datetime) else value
    return payload
