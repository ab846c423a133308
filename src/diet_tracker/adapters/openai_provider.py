"""OpenAI chat completions provider for food recognition."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from diet_tracker.domain.errors import ProviderError
from diet_tracker.domain.recognition import ProviderRequest, RequestKind
from diet_tracker.services.prompts import build_messages, max_tokens_for
from diet_tracker.services.recognition import RecognitionProvider


@dataclass
class OpenAIRecognitionProvider(RecognitionProvider):
    """Primary provider calling the OpenAI API directly."""

    client: AsyncOpenAI
    text_timeout_seconds: float = 10.0
    image_timeout_seconds: float = 30.0
    name: str = "OpenAI"

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str | None = None,
        text_timeout_seconds: float = 10.0,
        image_timeout_seconds: float = 30.0,
    ) -> "OpenAIRecognitionProvider":
        """Create a provider with its own OpenAI client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0),
            text_timeout_seconds=text_timeout_seconds,
            image_timeout_seconds=image_timeout_seconds,
        )

    async def send(self, request: ProviderRequest) -> dict[str, object]:
        """Call chat completions and return the assistant text as ``content``."""
        timeout = (
            self.image_timeout_seconds
            if request.kind is RequestKind.IMAGE_ANALYSIS
            else self.text_timeout_seconds
        )
        try:
            response = await self.client.chat.completions.create(
                model=request.model_hint,
                messages=build_messages(request),
                max_tokens=max_tokens_for(request.kind),
                timeout=timeout,
            )
        except openai.APIStatusError as exc:
            raise ProviderError(
                self.name, f"API error {exc.status_code}: {exc.message}"
            ) from exc
        except openai.APIError as exc:
            raise ProviderError(self.name, str(exc)) from exc

        if not response.choices:
            raise ProviderError(self.name, "response contained no choices")
        content = response.choices[0].message.content
        if not content:
            raise ProviderError(self.name, "returned an empty response")
        return {"content": content, "model": request.model_hint}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
