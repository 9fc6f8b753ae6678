from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx
from pydantic import ValidationError

from models.schemas import Airline, Airport
from reference.registry import ReferenceDataRegistry
from settings import SETTINGS
from tools.retry import RetryPolicy, with_retry

logger = logging.getLogger(__name__)


class AviationAPIError(RuntimeError):
    pass


class AviationReferenceClient:
    """Fetch airport and airline reference lists.

    With no base URL configured the bundled registry data is served, so local
    development and tests never touch the network.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
        registry: ReferenceDataRegistry | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (SETTINGS.aviation_api_url if base_url is None else base_url).rstrip("/")
        self.api_key = SETTINGS.aviation_api_key if api_key is None else api_key
        self.timeout_seconds = SETTINGS.http_timeout_seconds if timeout_seconds is None else timeout_seconds
        self.registry = registry or ReferenceDataRegistry()
        self.retry_policy = retry_policy or RetryPolicy(retry_on=(httpx.TransportError, AviationAPIError))
        self._transport = transport

    def remote_enabled(self) -> bool:
        return bool(self.base_url)

    async def fetch_airports(self) -> List[Airport]:
        if not self.remote_enabled():
            return self.registry.airports()
        rows = await with_retry(lambda: self._get_rows("/airports"), self.retry_policy)
        return [self._parse(Airport, row) for row in rows]

    async def fetch_airlines(self) -> List[Airline]:
        if not self.remote_enabled():
            return self.registry.airlines()
        rows = await with_retry(lambda: self._get_rows("/airlines"), self.retry_policy)
        return [self._parse(Airline, row) for row in rows]

    async def _get_rows(self, path: str) -> List[Dict[str, Any]]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            resp = await client.get(path, headers=headers)
        if resp.status_code >= 400:
            raise AviationAPIError(f"aviation_api_{resp.status_code}: {path}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise AviationAPIError(f"aviation_api_bad_json: {path}") from exc
        rows = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise AviationAPIError(f"aviation_api_unexpected_payload: {path}")
        return rows

    @staticmethod
    def _parse(model, row: Dict[str, Any]):
        data = dict(row)
        # AviationStack-style payloads carry the country as country_iso2
        if "country" not in data and data.get("country_iso2"):
            data["country"] = data["country_iso2"]
        data["iata"] = str(data.get("iata") or data.get("iata_code") or "").upper()
        try:
            return model.model_validate({k: v for k, v in data.items() if k in model.model_fields})
        except ValidationError as exc:
            raise AviationAPIError(f"aviation_api_bad_row: {row!r}") from exc
