# llm_client.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

import openai

LOGGER = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "요청 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
PAYMENT_REQUIRED_MESSAGE = "크레딧이 부족합니다. 크레딧을 충전해주세요."
COMPLETION_FAILED_MESSAGE = "AI 생성 실패"
UNKNOWN_ERROR_MESSAGE = "알 수 없는 오류가 발생했습니다."


class GenerationError(RuntimeError):
    """Raised when generated text cannot be produced.

    ``status_code`` is the HTTP status the JSON endpoints answer with.
    """

    status_code = 500

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or UNKNOWN_ERROR_MESSAGE)


class GenerationRequestError(GenerationError):
    status_code = 400


class RateLimitExceeded(GenerationError):
    status_code = 429

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or RATE_LIMIT_MESSAGE)


class PaymentRequired(GenerationError):
    status_code = 402

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or PAYMENT_REQUIRED_MESSAGE)


class CompletionFailed(GenerationError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(message or COMPLETION_FAILED_MESSAGE)


class ChatCompletionClient:
    """
    Thin wrapper over an OpenAI-compatible chat completions endpoint.

    Every call sends exactly one ``[system, user]`` message pair with the
    configured model and temperature. The SDK's own retry loop is disabled;
    provider failures are translated into :class:`GenerationError` subclasses
    keyed by HTTP status.
    """

    def __init__(
        self,
        model_name: str,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        temperature: float = 0.8,
    ) -> None:
        self.model_name = (model_name or "").strip()
        self.api_key = (api_key or "").strip()
        if not self.api_key:
            raise GenerationError("LLM_API_KEY is not configured")
        self.base_url = base_url
        self.temperature = temperature
        self._client = openai.OpenAI(api_key=self.api_key, base_url=base_url, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        kwargs = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": float(self.temperature),
        }

        try:
            resp = self._client.chat.completions.create(**kwargs)
        except openai.APIStatusError as exc:
            raise self._map_status_error(exc) from exc

        return self._extract_text_from_chat(resp)

    @staticmethod
    def _map_status_error(exc: openai.APIStatusError) -> GenerationError:
        status = exc.status_code
        if status == 429:
            return RateLimitExceeded()
        if status == 402:
            return PaymentRequired()
        LOGGER.error("AI gateway error: %s %s", status, _shorten_debug(str(exc.body or exc.message)))
        return CompletionFailed()

    # ---------------- extractors ----------------
    @staticmethod
    def _extract_text_from_chat(resp: Any) -> str:
        choices = getattr(resp, "choices", []) or []
        if not choices:
            return ""
        first = choices[0]
        msg = getattr(first, "message", None)
        if isinstance(msg, dict):
            content = msg.get("content")
        else:
            content = getattr(msg, "content", None)
        if isinstance(content, list):
            parts: List[str] = []
            for p in content:
                if isinstance(p, dict) and p.get("type") == "text":
                    parts.append(str(p.get("text") or ""))
            return "\n".join([p for p in parts if p])
        return str(content or "")


def _shorten_debug(s: str, limit: int = 1200) -> str:
    s = s.replace("\n", " ")
    return (s[:limit] + "…") if len(s) > limit else s
