"""
The relay itself: coffee details in, recipe HTML out.

Relay.handle() is the whole request pipeline and is shared by every route in
aidgen.main. The OpenAI credential and (optionally) the httpx client are
passed in, so the relay can be driven against a fake upstream.
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from .config import OPENAI_API_URL, UPSTREAM_TIMEOUT
from .errors import InvalidRequestError, MethodNotAllowedError, RelayError, UpstreamError
from .prompts import build_messages, present_fields
from .schemas import ChatCompletionRequest, RecipeRequest

logger = logging.getLogger(__name__)

MODEL = "gpt-3.5-turbo"
TEMPERATURE = 0.5
MAX_TOKENS = 800


def parse_request(body: bytes) -> RecipeRequest:
    data = json.loads(body)
    if data is None:
        raise ValueError("request body must not be null")
    if not isinstance(data, dict):
        # arrays, strings and numbers carry no recognized fields
        return RecipeRequest()
    return RecipeRequest.model_validate(data)


def build_payload(recipe: RecipeRequest) -> Dict[str, Any]:
    request = ChatCompletionRequest(
        model=MODEL,
        messages=build_messages(recipe),
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
    )
    return request.model_dump()


def extract_content(result: Any) -> str:
    """First choice's message content, or "" if any step of the path is missing."""
    try:
        content = result["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content or ""


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


class Relay:
    def __init__(
        self,
        api_key: str,
        api_url: str = OPENAI_API_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = UPSTREAM_TIMEOUT,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        if self._client is not None:
            return await self._client.post(self.api_url, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.api_url, json=payload, headers=headers)

    async def generate(self, recipe: RecipeRequest) -> str:
        """Send one completion request upstream and return the model's text."""
        payload = build_payload(recipe)
        resp = await self._post(payload)
        if not resp.is_success:
            logger.warning("upstream returned %s", resp.status_code)
            raise UpstreamError(resp.status_code, resp.text)
        return extract_content(resp.json())

    async def handle(
        self, method: str, body: bytes, audit: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Dict[str, Any]]:
        """Run one inbound request and return (status code, JSON body).

        If an audit dict is given, the recognized fields that were present and
        the outcome are recorded in it.
        """
        if audit is None:
            audit = {}
        try:
            if method.upper() != "POST":
                raise MethodNotAllowedError(method)
            try:
                recipe = parse_request(body)
                audit["fields"] = present_fields(recipe)
                html = await self.generate(recipe)
            except RelayError:
                raise
            except Exception as e:
                raise InvalidRequestError(_describe(e)) from e
        except RelayError as e:
            audit["status"] = e.audit_status
            audit["error"] = str(e)
            return e.status_code, e.to_dict()

        audit["status"] = "ok"
        return 200, {"html": html}
