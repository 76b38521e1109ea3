import json
import os
import sys

# Ensure weather-assistant/ is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
import respx

from errors import NetworkError, UpstreamError
from proxy_client import complete_chat

PROXY_URL = "http://proxy.test"
AI_URL = f"{PROXY_URL}/api/ai"
MESSAGES = [{"role": "user", "content": "Will it rain?"}]


@respx.mock
async def test_posts_messages_and_system_prompt():
    route = respx.post(AI_URL).mock(return_value=httpx.Response(200, json={"text": "Probably."}))

    reply = await complete_chat(MESSAGES, "Be brief.", PROXY_URL)

    assert reply == "Probably."
    body = json.loads(route.calls.last.request.content)
    assert body == {"messages": MESSAGES, "system": "Be brief."}


@respx.mock
async def test_missing_text_returns_empty_string():
    respx.post(AI_URL).mock(return_value=httpx.Response(200, json={}))

    assert await complete_chat(MESSAGES, "", PROXY_URL) == ""


@respx.mock
async def test_error_body_is_surfaced():
    respx.post(AI_URL).mock(
        return_value=httpx.Response(500, json={"error": "GEMINI_API_KEY not configured"})
    )

    with pytest.raises(UpstreamError) as excinfo:
        await complete_chat(MESSAGES, "", PROXY_URL)

    assert str(excinfo.value) == "GEMINI_API_KEY not configured"
    assert excinfo.value.status_code == 500


@respx.mock
async def test_error_without_body_uses_status():
    respx.post(AI_URL).mock(return_value=httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(UpstreamError) as excinfo:
        await complete_chat(MESSAGES, "", PROXY_URL)

    assert str(excinfo.value) == "API error 502"


@respx.mock
async def test_non_json_success_is_an_upstream_error():
    respx.post(AI_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(UpstreamError):
        await complete_chat(MESSAGES, "", PROXY_URL)


@respx.mock
async def test_unreachable_proxy_is_a_network_error():
    respx.post(AI_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(NetworkError):
        await complete_chat(MESSAGES, "", PROXY_URL)


@respx.mock
async def test_non_object_json_success_is_an_upstream_error():
    respx.post(AI_URL).mock(return_value=httpx.Response(200, json=["x"]))

    with pytest.raises(UpstreamError) as excinfo:
        await complete_chat(MESSAGES, "", PROXY_URL)

    assert excinfo.value.status_code == 200


@respx.mock
async def test_non_object_json_error_uses_status():
    respx.post(AI_URL).mock(return_value=httpx.Response(500, json=["boom"]))

    with pytest.raises(UpstreamError) as excinfo:
        await complete_chat(MESSAGES, "", PROXY_URL)

    assert str(excinfo.value) == "API error 500"
