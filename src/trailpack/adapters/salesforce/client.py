"""Async client for the Salesforce REST query and Tooling query endpoints."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from trailpack.adapters.http_resilience import ClientFactory, ResilientClient

from .schema import ApiErrorItem, QueryResponse

if TYPE_CHECKING:
    from trailpack.config.salesforce import SalesforceConfig

log = getLogger(__name__)


class SalesforceAPIError(RuntimeError):
    """Raised when Salesforce answers with an error or an unexpected payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class SalesforceClient:
    """Runs SOQL queries, following ``nextRecordsUrl`` until the result is done."""

    def __init__(
        self,
        *,
        config: SalesforceConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    @property
    def config(self) -> SalesforceConfig:
        return self._config

    async def query(self, soql: str) -> list[dict[str, Any]]:
        return await self._query_all(f"{self._config.data_path}/query", soql)

    async def tooling_query(self, soql: str) -> list[dict[str, Any]]:
        return await self._query_all(f"{self._config.data_path}/tooling/query", soql)

    async def _query_all(self, path: str, soql: str) -> list[dict[str, Any]]:
        log.debug("SOQL %s: %s", path, soql)
        records: list[dict[str, Any]] = []
        async with self._client_factory(self._config.resilience) as client:
            page = await self._perform_request(client=client, url=path, params={"q": soql})
            records.extend(page.records)
            while not page.done and page.next_records_url:
                page = await self._perform_request(client=client, url=page.next_records_url)
                records.extend(page.records)
        return records

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        url: str,
        params: dict[str, str] | None = None,
    ) -> QueryResponse:
        response = await client.get(url, params=params)
        if response.is_error:
            raise _api_error(response)

        try:
            return QueryResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise SalesforceAPIError(
                "Unexpected Salesforce query payload", status_code=response.status_code
            ) from exc


def _api_error(response: httpx.Response) -> SalesforceAPIError:
    message = f"Salesforce request failed with HTTP {response.status_code}"
    error_code: str | None = None
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, list) and payload:
        try:
            item = ApiErrorItem.model_validate(payload[0])
        except ValidationError:
            item = None
        if item is not None:
            message = item.message
            error_code = item.error_code
    log.error(f"Salesforce API error {response.status_code} ({error_code}): {message}")
    return SalesforceAPIError(message, status_code=response.status_code, error_code=error_code)
