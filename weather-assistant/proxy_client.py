import logging

import httpx

from config import AI_PROXY_URL
from errors import NetworkError, UpstreamError

logger = logging.getLogger(__name__)


async def complete_chat(
    messages: list[dict],
    system: str,
    proxy_url: str = AI_PROXY_URL,
) -> str:
    """POST the conversation to the AI proxy and return the reply text.

    Raises UpstreamError on a non-2xx response and NetworkError when the
    request never completes. No timeout is applied.
    """
    url = f"{proxy_url}/api/ai"
    try:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.post(url, json={"messages": messages, "system": system})
    except httpx.RequestError as exc:
        logger.error("AI proxy unreachable at %s: %s", url, exc)
        raise NetworkError("AI service is unreachable.") from exc

    if response.is_success:
        data = _json_object(response)
        if data is None:
            logger.error("AI proxy returned a malformed body: %r", response.text[:200])
            raise UpstreamError(
                "AI service returned an invalid response.", status_code=response.status_code
            )
        return data.get("text") or ""

    error_msg = (_json_object(response) or {}).get("error")
    error_msg = error_msg or f"API error {response.status_code}"
    logger.error("AI proxy error %d: %s", response.status_code, error_msg)
    raise UpstreamError(error_msg, status_code=response.status_code)


def _json_object(response: httpx.Response) -> dict | None:
    """Decode a JSON object body; anything else (non-JSON, arrays, scalars) is None."""
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
