"""
Unit tests for the completion clients.

HTTP providers are exercised against httpx.MockTransport so request
payloads and stream parsing can be checked without a network.
"""

import json

import httpx
import pytest

from fitcoach.config.settings import Settings
from fitcoach.infrastructure.ai.completion_client import (
    GeminiClient,
    OllamaClient,
    OpenAICompatibleClient,
    SamplingParams,
    build_completion_client,
)
from fitcoach.infrastructure.exceptions import (
    ConfigurationError,
    RateLimitError,
    UpstreamError,
)


MESSAGES = [
    {"role": "system", "content": "You are a coach."},
    {"role": "user", "content": "hi"},
]


def _sse(*chunks) -> bytes:
    lines = []
    for chunk in chunks:
        data = chunk if isinstance(chunk, str) else json.dumps(chunk)
        lines.append(f"data: {data}\n\n")
    return "".join(lines).encode()


def _delta(content=None, finish_reason=None) -> dict:
    return {"choices": [{"delta": {"content": content} if content else {}, "finish_reason": finish_reason}]}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def _openai(handler) -> OpenAICompatibleClient:
    return OpenAICompatibleClient(
        model="gpt-test",
        base_url="https://llm.test/v1/",
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
    )


async def _drain(stream):
    return [fragment async for fragment in stream]


class TestSamplingParams:

    def test_for_chat(self):
        params = SamplingParams.for_chat(Settings(_env_file=None))
        assert params.temperature == 0.85
        assert params.top_p == 0.95
        assert params.frequency_penalty == 0.3
        assert params.presence_penalty == 0.4

    def test_for_plans(self):
        params = SamplingParams.for_plans(Settings(_env_file=None, plan_temperature=0.5))
        assert params.temperature == 0.5
        assert params.max_tokens == 4000
        assert params.top_p is None


class TestOpenAICompatibleStream:

    @pytest.mark.asyncio
    async def test_streams_fragments_in_order(self):
        handler = Recorder(httpx.Response(200, content=_sse(
            _delta("Hel"), _delta("lo"), _delta(finish_reason="stop"), "[DONE]"
        )))
        client = _openai(handler)

        fragments = await _drain(client.stream_chat(MESSAGES, SamplingParams.for_chat(Settings(_env_file=None))))

        assert fragments == ["Hel", "lo"]
        request = handler.requests[0]
        assert request.url == "https://llm.test/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer sk-test"
        assert handler.payload["stream"] is True
        assert handler.payload["messages"] == MESSAGES
        assert handler.payload["frequency_penalty"] == 0.3
        await client.aclose()

    @pytest.mark.asyncio
    async def test_done_marker_alone_completes(self):
        client = _openai(Recorder(httpx.Response(200, content=_sse(_delta("ok"), "[DONE]"))))
        assert await _drain(client.stream_chat(MESSAGES, SamplingParams())) == ["ok"]

    @pytest.mark.asyncio
    async def test_optional_params_are_omitted(self):
        handler = Recorder(httpx.Response(200, content=_sse("[DONE]")))
        await _drain(_openai(handler).stream_chat(MESSAGES, SamplingParams()))

        assert "top_p" not in handler.payload
        assert "presence_penalty" not in handler.payload

    @pytest.mark.asyncio
    async def test_stream_without_completion_signal_fails(self):
        client = _openai(Recorder(httpx.Response(200, content=_sse(_delta("cut off")))))

        fragments = []
        with pytest.raises(UpstreamError):
            async for fragment in client.stream_chat(MESSAGES, SamplingParams()):
                fragments.append(fragment)
        assert fragments == ["cut off"]

    @pytest.mark.asyncio
    async def test_malformed_chunks_are_skipped(self):
        body = b"data: {not json}\n\n" + _sse(_delta("fine"), "[DONE]")
        client = _openai(Recorder(httpx.Response(200, content=body)))
        assert await _drain(client.stream_chat(MESSAGES, SamplingParams())) == ["fine"]

    @pytest.mark.asyncio
    async def test_error_chunk(self):
        client = _openai(Recorder(httpx.Response(200, content=_sse({"error": "overloaded"}))))
        with pytest.raises(UpstreamError, match="overloaded"):
            await _drain(client.stream_chat(MESSAGES, SamplingParams()))

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        client = _openai(Recorder(httpx.Response(429, headers={"retry-after": "12"}, text="slow down")))
        with pytest.raises(RateLimitError) as exc_info:
            await _drain(client.stream_chat(MESSAGES, SamplingParams()))
        assert exc_info.value.details["retry_after_seconds"] == 12

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        client = _openai(Recorder(httpx.Response(500, text="boom")))
        with pytest.raises(UpstreamError) as exc_info:
            await _drain(client.stream_chat(MESSAGES, SamplingParams()))
        assert not isinstance(exc_info.value, RateLimitError)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamError, match="refused"):
            await _drain(_openai(handler).stream_chat(MESSAGES, SamplingParams()))


class TestOpenAICompatibleComplete:

    @pytest.mark.asyncio
    async def test_returns_message_content(self):
        handler = Recorder(httpx.Response(200, json={
            "choices": [{"message": {"role": "assistant", "content": '{"name": "PPL"}'}}]
        }))

        content = await _openai(handler).complete(MESSAGES, SamplingParams(), json_mode=True)

        assert content == '{"name": "PPL"}'
        assert handler.payload["response_format"] == {"type": "json_object"}
        assert "stream" not in handler.payload

    @pytest.mark.asyncio
    async def test_plain_mode_has_no_response_format(self):
        handler = Recorder(httpx.Response(200, json={"choices": [{"message": {"content": "hi"}}]}))
        await _openai(handler).complete(MESSAGES, SamplingParams())
        assert "response_format" not in handler.payload

    @pytest.mark.asyncio
    async def test_unexpected_body(self):
        client = _openai(Recorder(httpx.Response(200, json={"unexpected": True})))
        with pytest.raises(UpstreamError):
            await client.complete(MESSAGES, SamplingParams())


class TestOllama:

    def _client(self, handler) -> OllamaClient:
        return OllamaClient(
            model="llama-test",
            base_url="http://ollama.test",
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_streams_ndjson(self):
        body = "\n".join(json.dumps(line) for line in [
            {"message": {"content": "Lift "}, "done": False},
            {"message": {"content": "heavy"}, "done": False},
            {"message": {"content": ""}, "done": True},
        ]).encode()
        handler = Recorder(httpx.Response(200, content=body))

        fragments = await _drain(self._client(handler).stream_chat(MESSAGES, SamplingParams(top_p=0.9)))

        assert fragments == ["Lift ", "heavy"]
        assert handler.requests[0].url == "http://ollama.test/api/chat"
        assert handler.payload["options"]["num_predict"] == 2000
        assert handler.payload["options"]["top_p"] == 0.9

    @pytest.mark.asyncio
    async def test_stream_without_done_fails(self):
        body = json.dumps({"message": {"content": "partial"}, "done": False}).encode()
        with pytest.raises(UpstreamError):
            await _drain(self._client(Recorder(httpx.Response(200, content=body))).stream_chat(MESSAGES, SamplingParams()))

    @pytest.mark.asyncio
    async def test_json_mode(self):
        handler = Recorder(httpx.Response(200, json={"message": {"content": "{}"}}))
        content = await self._client(handler).complete(MESSAGES, SamplingParams(), json_mode=True)

        assert content == "{}"
        assert handler.payload["format"] == "json"
        assert handler.payload["stream"] is False


class TestGeminiMessages:

    def test_system_turns_become_instruction(self):
        system, contents = GeminiClient._split_messages(
            MESSAGES + [{"role": "assistant", "content": "hey"}]
        )
        assert system == "You are a coach."
        assert [c.role for c in contents] == ["user", "model"]

    def test_no_system_turn(self):
        system, _ = GeminiClient._split_messages([{"role": "user", "content": "hi"}])
        assert system is None


class TestFactory:

    def test_openai_requires_key_for_hosted_api(self):
        with pytest.raises(ConfigurationError):
            build_completion_client(Settings(_env_file=None, llm_provider="openai", openai_api_key=None))

    def test_openai_compatible_local_server_needs_no_key(self):
        client = build_completion_client(Settings(
            _env_file=None,
            llm_provider="openai",
            openai_api_key=None,
            openai_base_url="http://localhost:8080/v1",
        ))
        assert isinstance(client, OpenAICompatibleClient)

    def test_ollama(self):
        client = build_completion_client(Settings(_env_file=None, llm_provider="ollama", ollama_model="m"))
        assert isinstance(client, OllamaClient)
        assert client.model == "m"

    def test_gemini_requires_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_completion_client(Settings(
                _env_file=None, llm_provider="gemini", google_api_key=None, gemini_api_key=None
            ))
        assert exc_info.value.details["missing_keys"] == ["GOOGLE_API_KEY"]

    def test_gemini(self):
        client = build_completion_client(Settings(_env_file=None, llm_provider="gemini", gemini_api_key="g"))
        assert isinstance(client, GeminiClient)
