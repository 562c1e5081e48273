"""
Completion Clients for FitCoach

One contract over the supported LLM providers: streaming text completion
over an ordered list of role-tagged messages, plus a one-shot completion
used by plan generation.

Providers:
- openai: any OpenAI-compatible /chat/completions endpoint (SSE stream)
- ollama: local /api/chat (NDJSON stream)
- gemini: google.genai async SDK
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import AsyncIterator, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from fitcoach.config.settings import Settings, get_settings
from fitcoach.infrastructure.exceptions import (
    ConfigurationError,
    RateLimitError,
    UpstreamError,
)


logger = logging.getLogger(__name__)


# {"role": "system" | "user" | "assistant", "content": str}
ChatTurn = Dict[str, str]


@dataclass(frozen=True)
class SamplingParams:
    """Sampling knobs passed through to the provider."""
    temperature: float = 0.7
    max_tokens: int = 2000
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None

    @classmethod
    def for_chat(cls, settings: Settings) -> "SamplingParams":
        return cls(
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
            top_p=settings.chat_top_p,
            frequency_penalty=settings.chat_frequency_penalty,
            presence_penalty=settings.chat_presence_penalty,
        )

    @classmethod
    def for_plans(cls, settings: Settings) -> "SamplingParams":
        return cls(temperature=settings.plan_temperature, max_tokens=4000)


def _retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("retry-after")
    try:
        return int(float(value)) if value else None
    except ValueError:
        return None


class CompletionClient(ABC):
    """Provider-agnostic LLM client."""

    def __init__(self, model: str):
        self.model = model

    @abstractmethod
    def stream_chat(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
    ) -> AsyncIterator[str]:
        """
        Stream a chat completion as text fragments, in order.

        The iterator finishes only when the provider signals completion;
        anything else raises UpstreamError. Closing the iterator early
        closes the underlying provider stream.
        """

    @abstractmethod
    async def complete(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
        json_mode: bool = False,
    ) -> str:
        """Return a full completion as one string."""

    async def aclose(self) -> None:
        """Release network resources."""


# ============================================================================
# OpenAI-compatible
# ============================================================================

class OpenAICompatibleClient(CompletionClient):
    """
    Client for OpenAI-style /chat/completions APIs.

    Streams are Server-Sent Events: `data: {json}` lines terminated by
    `data: [DONE]`.
    """

    def __init__(
        self,
        model: str,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(model)
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def _payload(self, messages: List[ChatTurn], params: SamplingParams) -> dict:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
        }
        if params.top_p is not None:
            payload["top_p"] = params.top_p
        if params.frequency_penalty is not None:
            payload["frequency_penalty"] = params.frequency_penalty
        if params.presence_penalty is not None:
            payload["presence_penalty"] = params.presence_penalty
        return payload

    async def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        if response.status_code < 400:
            return
        await response.aread()
        if response.status_code == 429:
            logger.warning(f"Rate limited by {self.model} during {operation}")
            raise RateLimitError(
                f"Rate limit exceeded for {self.model}",
                retry_after=_retry_after(response),
            )
        logger.error(f"{operation} failed with HTTP {response.status_code}: {response.text[:500]}")
        raise UpstreamError(
            f"LLM provider returned HTTP {response.status_code}",
            model=self.model,
            operation=operation,
        )

    async def stream_chat(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
    ) -> AsyncIterator[str]:
        payload = self._payload(messages, params)
        payload["stream"] = True

        try:
            async with self._client.stream("POST", "/chat/completions", json=payload) as response:
                await self._raise_for_status(response, "stream_chat")

                completed = False
                async for line in response.aiter_lines():
                    line = line.strip()
                    if not line.startswith("data:"):
                        continue

                    data = line[len("data:"):].strip()
                    if data == "[DONE]":
                        completed = True
                        break

                    try:
                        chunk = json.loads(data)
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed stream chunk: {data[:200]}")
                        continue

                    if chunk.get("error"):
                        raise UpstreamError(
                            f"LLM provider error: {chunk['error']}",
                            model=self.model,
                            operation="stream_chat",
                        )

                    choices = chunk.get("choices") or []
                    if not choices:
                        continue

                    content = (choices[0].get("delta") or {}).get("content")
                    if content:
                        yield content
                    if choices[0].get("finish_reason"):
                        completed = True

                if not completed:
                    raise UpstreamError(
                        "LLM stream ended without a completion signal",
                        model=self.model,
                        operation="stream_chat",
                    )
        except httpx.HTTPError as e:
            logger.error(f"LLM stream transport error: {e}")
            raise UpstreamError(
                f"LLM stream failed: {e}",
                model=self.model,
                operation="stream_chat",
                original_error=e,
            )

    async def complete(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
        json_mode: bool = False,
    ) -> str:
        payload = self._payload(messages, params)
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.post("/chat/completions", json=payload)
            await self._raise_for_status(response, "complete")
            data = response.json()
            return data["choices"][0]["message"]["content"] or ""
        except httpx.HTTPError as e:
            logger.error(f"LLM request failed: {e}")
            raise UpstreamError(
                f"LLM request failed: {e}",
                model=self.model,
                operation="complete",
                original_error=e,
            )
        except (KeyError, IndexError, ValueError) as e:
            logger.error(f"LLM response parsing error: {e}")
            raise UpstreamError(
                "Unexpected response from LLM provider",
                model=self.model,
                operation="complete",
                original_error=e,
            )

    async def aclose(self) -> None:
        await self._client.aclose()


# ============================================================================
# Ollama
# ============================================================================

class OllamaClient(CompletionClient):
    """Client for a local Ollama server (no API costs)."""

    def __init__(
        self,
        model: str,
        base_url: str,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(model)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    def _payload(self, messages: List[ChatTurn], params: SamplingParams, stream: bool) -> dict:
        options = {
            "temperature": params.temperature,
            "num_predict": params.max_tokens,
        }
        if params.top_p is not None:
            options["top_p"] = params.top_p
        if params.frequency_penalty is not None:
            options["frequency_penalty"] = params.frequency_penalty
        if params.presence_penalty is not None:
            options["presence_penalty"] = params.presence_penalty
        return {
            "model": self.model,
            "messages": messages,
            "stream": stream,
            "options": options,
        }

    async def stream_chat(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
    ) -> AsyncIterator[str]:
        payload = self._payload(messages, params, stream=True)

        try:
            async with self._client.stream("POST", "/api/chat", json=payload) as response:
                if response.status_code >= 400:
                    await response.aread()
                    logger.error(f"Ollama API error {response.status_code}: {response.text[:500]}")
                    raise UpstreamError(
                        f"Ollama returned HTTP {response.status_code}",
                        model=self.model,
                        operation="stream_chat",
                    )

                completed = False
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    chunk = json.loads(line)
                    if chunk.get("error"):
                        raise UpstreamError(
                            f"Ollama error: {chunk['error']}",
                            model=self.model,
                            operation="stream_chat",
                        )
                    content = (chunk.get("message") or {}).get("content")
                    if content:
                        yield content
                    if chunk.get("done"):
                        completed = True
                        break

                if not completed:
                    raise UpstreamError(
                        "Ollama stream ended without a completion signal",
                        model=self.model,
                        operation="stream_chat",
                    )
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.error(f"Ollama stream error: {e}")
            raise UpstreamError(
                f"Ollama stream failed: {e}",
                model=self.model,
                operation="stream_chat",
                original_error=e,
            )

    async def complete(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
        json_mode: bool = False,
    ) -> str:
        payload = self._payload(messages, params, stream=False)
        if json_mode:
            payload["format"] = "json"

        try:
            logger.info("Ollama is generating the response...")
            response = await self._client.post("/api/chat", json=payload)
            response.raise_for_status()
            return (response.json().get("message") or {}).get("content", "")
        except httpx.HTTPError as e:
            logger.error(f"Ollama API error: {e}")
            raise UpstreamError(
                f"Ollama generation failed: {e}",
                model=self.model,
                operation="complete",
                original_error=e,
            )

    async def aclose(self) -> None:
        await self._client.aclose()


# ============================================================================
# Gemini
# ============================================================================

class GeminiClient(CompletionClient):
    """Client for Google Gemini using the google.genai SDK."""

    def __init__(self, model: str, api_key: str):
        super().__init__(model)
        self._client = genai.Client(api_key=api_key)

    @staticmethod
    def _split_messages(messages: List[ChatTurn]):
        system_parts = []
        contents = []
        for message in messages:
            if message["role"] == "system":
                system_parts.append(message["content"])
                continue
            role = "model" if message["role"] == "assistant" else "user"
            contents.append(
                types.Content(role=role, parts=[types.Part(text=message["content"])])
            )
        return "\n\n".join(system_parts) or None, contents

    def _config(
        self,
        system_instruction: Optional[str],
        params: SamplingParams,
        json_mode: bool = False,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=params.temperature,
            top_p=params.top_p,
            max_output_tokens=params.max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )

    def _translate_error(self, e: genai_errors.APIError, operation: str) -> UpstreamError:
        if e.code == 429:
            return RateLimitError("Gemini API rate limit exceeded", original_error=e)
        return UpstreamError(
            f"Gemini request failed: {e}",
            model=self.model,
            operation=operation,
            original_error=e,
        )

    async def stream_chat(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
    ) -> AsyncIterator[str]:
        system_instruction, contents = self._split_messages(messages)
        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=self.model,
                contents=contents,
                config=self._config(system_instruction, params),
            )
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text
        except genai_errors.APIError as e:
            logger.error(f"Gemini stream error: {e}")
            raise self._translate_error(e, "stream_chat")

    async def complete(
        self,
        messages: List[ChatTurn],
        params: SamplingParams,
        json_mode: bool = False,
    ) -> str:
        system_instruction, contents = self._split_messages(messages)
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=self._config(system_instruction, params, json_mode),
            )
            return response.text or ""
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error: {e}")
            raise self._translate_error(e, "complete")


# ============================================================================
# Factory
# ============================================================================

def build_completion_client(settings: Settings) -> CompletionClient:
    """
    Create the client selected by LLM_PROVIDER.

    Raises:
        ConfigurationError: the selected provider is missing its key
    """
    if settings.llm_provider == "ollama":
        return OllamaClient(
            model=settings.ollama_model,
            base_url=settings.ollama_base_url,
        )

    if settings.llm_provider == "gemini":
        if not settings.google_api_key:
            raise ConfigurationError(
                "Missing GOOGLE_API_KEY environment variable",
                missing_keys=["GOOGLE_API_KEY"]
            )
        return GeminiClient(model=settings.gemini_model, api_key=settings.google_api_key)

    if not settings.openai_api_key and "api.openai.com" in settings.openai_base_url:
        raise ConfigurationError(
            "Missing OPENAI_API_KEY environment variable",
            missing_keys=["OPENAI_API_KEY"]
        )
    return OpenAICompatibleClient(
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        timeout=settings.llm_request_timeout_seconds,
    )


@lru_cache
def get_completion_client() -> CompletionClient:
    """Get the process-wide completion client (FastAPI dependency)."""
    client = build_completion_client(get_settings())
    logger.info(f"Completion client initialized: {type(client).__name__} ({client.model})")
    return client
