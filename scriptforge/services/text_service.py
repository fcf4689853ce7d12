"""
ScriptForge Text Service

Client for the external text generation collaborator used by "continue
script" and "reformat" actions. The collaborator accepts chat messages and
answers either with a ``data:`` event stream of content deltas or with a
plain JSON body.

Any transport or HTTP failure surfaces as a single TextServiceError. There
is no retry; the caller decides what to do.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Protocol

import httpx

from scriptforge.core.config import TextServiceConfig
from scriptforge.core.env_loader import get_api_key
from scriptforge.core.exceptions import TextServiceError
from scriptforge.core.logging_config import get_logger
from scriptforge.script.document import ScriptDocument

logger = get_logger("services.text")

STREAM_PREFIX = "data:"
STREAM_DONE = "[DONE]"

CONTINUE_PROMPT = (
    "Continue this screenplay from where it stops. Keep the same characters, "
    "tone and formatting. Return only new screenplay lines.\n\n{script}"
)
REFORMAT_PROMPT = (
    "Reformat the following text as screenplay lines: scene headings, action, "
    "character names, parentheticals, dialogue and transitions. Return only "
    "the reformatted text.\n\n{text}"
)


class TextService(Protocol):
    """Anything that turns a prompt into generated text."""

    def generate(self, prompt: str) -> str:
        ...


def parse_stream(lines: Iterable[str]) -> str:
    """
    Collect content deltas from ``data:`` event lines.

    Stops at ``[DONE]``; lines that aren't data events or aren't valid JSON
    are skipped.
    """
    content: List[str] = []
    for raw in lines:
        line = raw.strip()
        if not line.startswith(STREAM_PREFIX):
            continue
        data = line[len(STREAM_PREFIX):].strip()
        if data == STREAM_DONE:
            break
        try:
            parsed = json.loads(data)
        except json.JSONDecodeError:
            continue
        if not isinstance(parsed, dict):
            continue
        choices = parsed.get("choices") or [{}]
        delta = (choices[0].get("delta") or {}).get("content")
        if delta:
            content.append(delta)
    return "".join(content)


def parse_body(body: Dict[str, Any]) -> str:
    """Extract generated text from a non-streaming JSON body."""
    if isinstance(body.get("content"), str):
        return body["content"]
    if isinstance(body.get("text"), str):
        return body["text"]
    choices = body.get("choices") or []
    if choices:
        message = choices[0].get("message") or choices[0].get("delta") or {}
        if isinstance(message.get("content"), str):
            return message["content"]
    raise TextServiceError("Response body carries no generated text")


class HttpTextService:
    """
    TextService over HTTP using httpx.

    Usage:
        service = HttpTextService(get_config().text_service)
        text = service.generate("Continue: ...")
    """

    def __init__(
        self,
        config: Optional[TextServiceConfig] = None,
        project_id: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or TextServiceConfig()
        self.project_id = project_id
        self._client = client
        self._async_client = async_client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        api_key = get_api_key(self.config.api_key_env)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def _body(self, prompt: str) -> Dict[str, Any]:
        return {
            "messages": [{"role": "user", "content": prompt}],
            "projectId": self.project_id,
        }

    def _read_response(self, response: httpx.Response) -> str:
        if response.status_code >= 400:
            reason = f"HTTP {response.status_code}"
            try:
                error = response.json().get("error")
            except (json.JSONDecodeError, AttributeError):
                error = None
            if isinstance(error, dict):
                error = error.get("message")
            if error:
                reason = str(error)
            raise TextServiceError(reason, response.status_code)

        content_type = response.headers.get("content-type", "")
        if "text/event-stream" in content_type or response.text.lstrip().startswith(STREAM_PREFIX):
            return parse_stream(response.text.split("\n"))

        try:
            body = response.json()
        except json.JSONDecodeError as e:
            raise TextServiceError(f"Invalid response body: {e}", response.status_code)
        if not isinstance(body, dict):
            raise TextServiceError("Response body is not an object", response.status_code)
        return parse_body(body)

    def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the generated text.

        Raises:
            TextServiceError: On any transport or HTTP failure
        """
        logger.debug(f"POST {self.config.url} ({len(prompt)} chars)")
        try:
            if self._client is not None:
                response = self._client.post(self.config.url, json=self._body(prompt), headers=self._headers())
            else:
                with httpx.Client(timeout=self.config.timeout) as client:
                    response = client.post(self.config.url, json=self._body(prompt), headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"Text service request failed: {e}")
            raise TextServiceError(str(e) or type(e).__name__)
        return self._read_response(response)

    async def agenerate(self, prompt: str) -> str:
        """Async variant of generate()."""
        logger.debug(f"POST {self.config.url} ({len(prompt)} chars, async)")
        try:
            if self._async_client is not None:
                response = await self._async_client.post(
                    self.config.url, json=self._body(prompt), headers=self._headers()
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.post(self.config.url, json=self._body(prompt), headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"Text service request failed: {e}")
            raise TextServiceError(str(e) or type(e).__name__)
        return self._read_response(response)


def continue_script(document: ScriptDocument, service: TextService) -> str:
    """Ask the service to continue a script; returns the suggested text."""
    return service.generate(CONTINUE_PROMPT.format(script=document.to_plain_text()))


def reformat_text(text: str, service: TextService) -> str:
    """Ask the service to rewrite free text as screenplay lines."""
    return service.generate(REFORMAT_PROMPT.format(text=text))
