"""Anthropic Messages API client used by both analysis passes.

One client is built per process from AnalysisSettings and handed to the
analyzer; it holds no per-request state. SDK retries are disabled: a
failed call surfaces immediately as UpstreamError and the caller decides
whether that is fatal.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import anthropic
import httpx

from dirty_data.analyzer.types import ModelReply
from dirty_data.config.settings import AnalysisSettings
from dirty_data.errors import UpstreamError

logger = logging.getLogger(__name__)


def extract_text(content_blocks: list[Any]) -> str:
    """Concatenate the text of all ``text`` blocks in a Messages response."""
    return "".join(
        block.text for block in content_blocks if getattr(block, "type", None) == "text"
    )


class AnthropicModelClient:
    """Thin wrapper over ``anthropic.Anthropic`` with error translation.

    Usage:
        client = AnthropicModelClient.from_settings(settings)
        reply = client.invoke(system_prompt, [{"role": "user", "content": "..."}], 4000)
        print(reply.text)
    """

    def __init__(self, sdk_client: anthropic.Anthropic, model: str) -> None:
        self._client = sdk_client
        self.model = model

    @classmethod
    def from_settings(cls, settings: AnalysisSettings) -> AnthropicModelClient:
        api_key = settings.api_key.get_secret_value() or None
        try:
            sdk_client = anthropic.Anthropic(
                api_key=api_key,
                timeout=httpx.Timeout(settings.timeout_seconds, connect=10.0),
                max_retries=0,
            )
        except anthropic.AnthropicError as exc:
            # Raised when neither ANALYSIS_API_KEY nor ANTHROPIC_API_KEY is set
            raise UpstreamError(f"Cannot create model client: {exc}") from exc
        return cls(sdk_client, settings.model)

    def invoke(
        self,
        system: str,
        messages: list[dict[str, Any]],
        max_tokens: int,
    ) -> ModelReply:
        """Run one model call and return its concatenated text.

        Raises:
            UpstreamError: On any API, HTTP status, timeout, or connection error.
        """
        logger.debug(
            "Invoking model: model=%s, max_tokens=%d, messages=%d",
            self.model,
            max_tokens,
            len(messages),
        )
        start = time.monotonic()
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system,
                messages=messages,
            )
        except anthropic.APIStatusError as exc:
            msg = f"Model API returned HTTP {exc.status_code}: {exc.message}"
            raise UpstreamError(msg) from exc
        except anthropic.APIError as exc:
            raise UpstreamError(f"Model API request failed: {exc}") from exc

        elapsed = time.monotonic() - start
        usage = getattr(response, "usage", None)
        reply = ModelReply(
            text=extract_text(response.content),
            model=getattr(response, "model", self.model),
            input_tokens=getattr(usage, "input_tokens", None),
            output_tokens=getattr(usage, "output_tokens", None),
        )
        logger.info(
            "Model call complete in %.1fs (model=%s, tokens=%s/%s)",
            elapsed,
            reply.model,
            reply.input_tokens,
            reply.output_tokens,
        )
        return reply
