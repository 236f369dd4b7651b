"""Thin client for the OpenAI-compatible chat completions endpoint."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

import httpx

from .config import ModelConfig
from .errors import ModelOutputMalformed, ModelTransportError

FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse a model response that should contain a single JSON object."""

    cleaned = (text or "").strip()
    fenced = FENCE_RE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ModelOutputMalformed(f"response is not valid JSON: {exc}", raw=text) from exc
    if not isinstance(data, dict):
        raise ModelOutputMalformed("response JSON is not an object", raw=text)
    return data


class ChatModelClient:
    """Send chat completions and return the first choice's text.

    The underlying ``httpx.Client`` is safe to share between threads, so a
    single instance serves every concurrently running pipeline.
    """

    def __init__(self, config: ModelConfig, client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _headers(self) -> Dict[str, str]:
        headers = {
            "HTTP-Referer": self.config.site_url,
            "X-Title": self.config.site_name,
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def complete(
        self,
        messages: List[Dict[str, Any]],
        *,
        temperature: float,
        response_format: Optional[Dict[str, Any]] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature,
        }
        if response_format is not None:
            payload["response_format"] = response_format
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        try:
            response = self._client.post(
                self.config.completions_url,
                headers=self._headers(),
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as exc:
            raise ModelTransportError(f"chat completion failed: {exc}") from exc
        if content is None:
            return ""
        if not isinstance(content, str):
            raise ModelTransportError(
                f"chat completion content is {type(content).__name__}, expected text"
            )
        return content.strip()


__all__ = ["ChatModelClient", "parse_json_object"]
