"""
Chat completions provider for OpenAI and OpenAI-compatible gateways.

OpenRouter speaks the same protocol; only the base URL, key and headers
differ (see :mod:`klar.config.providers`). In mock mode no client is
created and canned answers are returned, which keeps the application
usable offline.
"""

import json
import time
from typing import Dict, List, Optional

import httpx
from openai import OpenAI, APIConnectionError, APITimeoutError, InternalServerError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from klar.ai.base_provider import BaseProvider
from klar.config.prompts import REVIEW_SYSTEM_PROMPT
from klar.config.constants import (
    MAX_RETRIES, MAX_TOKENS, TEMPERATURE,
    API_CONNECT_TIMEOUT, API_READ_TIMEOUT,
)

# Transport failures worth another attempt; 4xx responses are not retried
RETRYABLE_ERRORS = (APIConnectionError, APITimeoutError, InternalServerError)

MOCK_REVIEW = {
    "score": 30,
    "feedback": "Gute Arbeit. Achte auf die Verbkonjugation.",
    "correction": "Ich --gehen-- ++gehe++ morgen ins Kino.",
}
MOCK_TASK = "Schreiben Sie eine E-Mail an Ihre Freundin und laden Sie sie zu Ihrem Geburtstag ein."


class OpenAIProvider(BaseProvider):
    """
    Chat completions over the ``openai`` SDK.

    Args:
        api_key: Key of the selected gateway
        base_url: Gateway URL (None for api.openai.com)
        model: Model identifier
        name: Display name for logs
        mock_mode: Answer with canned JSON instead of calling the API
        extra_headers: Headers sent with every request
        **client_options: Passed on to ``openai.OpenAI``
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        name: Optional[str] = None,
        mock_mode: bool = False,
        extra_headers: Optional[Dict[str, str]] = None,
        **client_options
    ):
        super().__init__(mock_mode=mock_mode)
        self.model = model
        self._name = name or model or "openai"
        self._exercises_generated = 0
        self.client = None if mock_mode else OpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=extra_headers,
            timeout=httpx.Timeout(API_READ_TIMEOUT, connect=API_CONNECT_TIMEOUT),
            max_retries=0,  # tenacity retries instead
            **client_options,
        )

    @property
    def name(self) -> str:
        return self._name

    @retry(
        stop=stop_after_attempt(MAX_RETRIES),
        wait=wait_exponential(multiplier=1, max=10),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        reraise=True,
    )
    def call_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: str = "text"
    ) -> str:
        start_time = time.time()

        if self.mock_mode:
            answer = self._mock_answer(system_prompt)
            self._log_call(response_format, prompt[:80], answer[:200], start_time)
            return answer

        request = {
            "model": self.model,
            "messages": _messages(prompt, system_prompt),
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }
        if response_format == "json":
            request["response_format"] = {"type": "json_object"}

        completion = self.client.chat.completions.create(**request)
        answer = completion.choices[0].message.content or ""

        usage = completion.usage
        self._log_call(
            response_format,
            prompt[:80],
            answer[:200],
            start_time,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )
        return answer

    def _mock_answer(self, system_prompt: Optional[str]) -> str:
        if system_prompt == REVIEW_SYSTEM_PROMPT:
            return json.dumps(MOCK_REVIEW, ensure_ascii=False)
        # Distinct titles, so repeated generation does not collide
        self._exercises_generated += 1
        return json.dumps(
            {"title": f"Übung {self._exercises_generated}", "task": MOCK_TASK},
            ensure_ascii=False,
        )


def _messages(prompt: str, system_prompt: Optional[str]) -> List[Dict[str, str]]:
    messages = [{"role": "user", "content": prompt}]
    if system_prompt:
        messages.insert(0, {"role": "system", "content": system_prompt})
    return messages
