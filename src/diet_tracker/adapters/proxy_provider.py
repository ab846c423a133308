"""Fallback proxy provider for food recognition."""

from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

import httpx

from diet_tracker.domain.errors import CorrelationMismatch, ProviderError
from diet_tracker.domain.recognition import ProviderRequest
from diet_tracker.services.normalization import text_content
from diet_tracker.services.prompts import build_messages, max_tokens_for
from diet_tracker.services.recognition import RecognitionProvider


def _new_request_id() -> str:
    return uuid4().hex


@dataclass
class HttpxProxyProvider(RecognitionProvider):
    """Fallback provider that relays requests through a chat-completion proxy.

    The proxy must echo the ``requestId`` it was sent; any other value is
    treated as a corrupted response.
    """

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0
    name: str = "Proxy"
    request_id_factory: Callable[[], str] = field(default=_new_request_id)

    @classmethod
    def create(
        cls, base_url: str, api_key: str, timeout_seconds: float = 15.0
    ) -> "HttpxProxyProvider":
        """Create a proxy provider with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def send(self, request: ProviderRequest) -> dict[str, object]:
        """POST the request envelope to the proxy and validate the echo."""
        request_id = self.request_id_factory()
        body = {
            "requestId": request_id,
            "apiKey": self.api_key,
            "model": request.model_hint,
            "kind": request.kind.value,
            "messages": build_messages(request),
            "max_tokens": max_tokens_for(request.kind),
        }
        try:
            response = await self.http_client.post(
                f"{self.base_url}/v1/chat/completions",
                json=body,
                headers={"Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise ProviderError(self.name, "request timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                self.name, f"HTTP error {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"network error: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(self.name, "error parsing response") from exc

        if not isinstance(payload, dict):
            raise ProviderError(self.name, "response was not a JSON object")
        echoed = payload.get("requestId")
        if echoed != request_id:
            raise CorrelationMismatch(request_id, echoed)

        content = text_content(payload)
        if content is not None:
            return {"content": content, "model": request.model_hint}
        return {key: value for key, value in payload.items() if key != "requestId"}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
