from __future__ import annotations

from collections.abc import Callable

import httpx

from trailpack.adapters.http_resilience import ResilientClient
from trailpack.config import InferenceConfig, ResilienceConfig, SalesforceConfig

INSTANCE_URL = "https://acme.my.salesforce.com"
INFERENCE_URL = "https://inference.test/v1"


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    base_url: str,
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=base_url,
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def salesforce_config() -> SalesforceConfig:
    return SalesforceConfig(
        instance_url=INSTANCE_URL,
        access_token="token",
        api_version="60.0",
        resilience=ResilienceConfig(name="salesforce-test", base_url=INSTANCE_URL),
    )


def inference_config() -> InferenceConfig:
    return InferenceConfig(
        api_key="sk-test",
        model="test-model",
        resilience=ResilienceConfig(name="inference-test", base_url=INFERENCE_URL),
    )
