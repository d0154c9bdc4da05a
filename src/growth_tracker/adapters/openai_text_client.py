"""OpenAI Responses API client for report classification."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from growth_tracker.services.classifier import TextGenerationClient


@dataclass
class OpenAITextClient(TextGenerationClient):
    """Text generation client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
        timeout_seconds: float = 60.0,
    ) -> "OpenAITextClient":
        """Create an OpenAI text client with a managed httpx session."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                http_client=httpx.AsyncClient(timeout=timeout_seconds),
            ),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def generate(self, prompt: str) -> str:
        """Send the prompt and return the raw output text."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
