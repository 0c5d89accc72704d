import json

import aiohttp


class HttpStatusError(Exception):
    """Non-success HTTP status; `detail` is the remote error message when one was sent."""

    def __init__(self, status: int, detail: str):
        super().__init__(f"HTTP {status}: {detail}")
        self.status = status
        self.detail = detail


async def _error_detail(response: aiohttp.ClientResponse) -> str:
    text = await response.text()
    try:
        body = json.loads(text)
    except ValueError:
        return text.strip()[:500] or response.reason or ""
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            value = body.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if value:
                return str(value)
    return text.strip()[:500]


async def fetch_json(session: aiohttp.ClientSession, method: str, url: str, **kwargs) -> dict:
    """Issue one request and return the decoded JSON object body.

    Raises HttpStatusError on a status >= 400, ValueError when the body is not a
    JSON object, and lets aiohttp.ClientError / asyncio.TimeoutError through.
    """
    async with session.request(method, url, **kwargs) as response:
        if response.status >= 400:
            raise HttpStatusError(response.status, await _error_detail(response))
        data = await response.json(content_type=None)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object from {url}, got {type(data).__name__}")
    return data
