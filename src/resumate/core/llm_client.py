from __future__ import annotations

import json
import logging
import re
import threading
from typing import Any, Dict, Optional, Protocol

from openai import OpenAI

from resumate.errors import UpstreamError
from resumate.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)


class LLMClient(Protocol):
    """Text in, text out. Implementations must not retry on their own."""

    def complete(
        self,
        *,
        system_prompt: Optional[str],
        user_prompt: str,
        model: str,
        json_mode: bool = False,
        temperature: Optional[float] = None,
    ) -> str: ...


def _build_messages(system_prompt: Optional[str], user_prompt: str) -> list[dict[str, str]]:
    messages: list[dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt.strip()})
    messages.append({"role": "user", "content": user_prompt.strip()})
    return messages


class OpenAIChatClient:
    """LLMClient backed by the OpenAI chat completions API.

    The underlying SDK client is created on first use and then shared by all
    requests in the process.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._client: OpenAI | None = None
        self._lock = threading.Lock()

    def _get_client(self) -> OpenAI:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    api_key = self._settings.openai_api_key
                    if not api_key:
                        raise UpstreamError("OPENAI_API_KEY is missing; cannot call LLM.")
                    self._client = OpenAI(
                        api_key=api_key,
                        timeout=self._settings.llm_timeout_s,
                        max_retries=0,
                    )
        return self._client

    def complete(
        self,
        *,
        system_prompt: Optional[str],
        user_prompt: str,
        model: str,
        json_mode: bool = False,
        temperature: Optional[float] = None,
    ) -> str:
        kwargs: Dict[str, Any] = {
            "model": model,
            "messages": _build_messages(system_prompt, user_prompt),
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            completion = self._get_client().chat.completions.create(**kwargs)
        except UpstreamError:
            raise
        except Exception as exc:
            logger.exception("LLM call to %s failed", model)
            raise UpstreamError(f"LLM request failed: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        return content or ""


def strip_code_fences(text: str) -> str:
    match = _FENCE_RE.match(text or "")
    return match.group(1).strip() if match else (text or "").strip()


def parse_json_object(raw: str, *, what: str = "LLM response") -> Dict[str, Any]:
    """Parse model output as a JSON object or raise; never returns partial data."""
    text = strip_code_fences(raw)
    if not text:
        raise UpstreamError(f"Empty {what}")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Could not parse %s as JSON: %s", what, exc)
        raise UpstreamError(f"Failed to parse {what} as JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise UpstreamError(f"{what} must be a JSON object")
    return data


def call_llm_json(
    client: LLMClient,
    prompt: str,
    *,
    model: str,
    system_prompt: Optional[str] = None,
    temperature: Optional[float] = None,
) -> Dict[str, Any]:
    """Call an LLM in JSON mode and return the parsed object."""
    raw = client.complete(
        system_prompt=system_prompt,
        user_prompt=prompt,
        model=model,
        json_mode=True,
        temperature=temperature,
    )
    return parse_json_object(raw)
