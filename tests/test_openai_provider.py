"""Tests for the OpenAI provider against a local aiohttp server."""

import pytest
from aiohttp import test_utils, web

from mock_interview.providers.openai_provider import OpenAIProvider
from mock_interview.utils.exceptions import AuthenticationError, LLMProviderError


def _provider(server, api_key="sk-test") -> OpenAIProvider:
    return OpenAIProvider({"api_key": api_key, "base_url": str(server.make_url("/v1")), "timeout": 5})


def _app(handler) -> web.Application:
    app = web.Application()
    app.router.add_post("/v1/chat/completions", handler)
    return app


async def test_returns_first_choice_content():
    received = {}

    async def completions(request):
        received["auth"] = request.headers.get("Authorization")
        received["body"] = await request.json()
        return web.json_response({"choices": [{"message": {"role": "assistant", "content": '{"score": 7}'}}]})

    async with test_utils.TestServer(_app(completions)) as server:
        text = await _provider(server).complete("Rate this", max_tokens=200)

    assert text == '{"score": 7}'
    assert received["auth"] == "Bearer sk-test"
    assert received["body"]["model"] == "gpt-4o-mini"
    assert received["body"]["max_tokens"] == 200
    assert received["body"]["messages"] == [{"role": "user", "content": "Rate this"}]


async def test_error_status_reads_as_empty_reply():
    async def completions(request):
        return web.json_response({"error": {"message": "overloaded"}}, status=503)

    async with test_utils.TestServer(_app(completions)) as server:
        assert await _provider(server).complete("Rate this") == ""


async def test_rejected_key_raises():
    async def completions(request):
        return web.json_response({"error": {"message": "bad key"}}, status=401)

    async with test_utils.TestServer(_app(completions)) as server:
        with pytest.raises(AuthenticationError):
            await _provider(server).complete("Rate this")


async def test_missing_key_raises_without_request():
    provider = OpenAIProvider({"api_key": ""})

    assert not provider.is_configured
    with pytest.raises(AuthenticationError):
        await provider.complete("Rate this")


async def test_unreachable_upstream_raises():
    async with test_utils.TestServer(web.Application()) as server:
        base_url = str(server.make_url("/v1"))

    provider = OpenAIProvider({"api_key": "sk-test", "base_url": base_url, "timeout": 2})
    with pytest.raises(LLMProviderError):
        await provider.complete("Rate this")
