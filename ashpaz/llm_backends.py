"""
Completion backends.

Each backend sends an assembled prompt to one LLM provider and returns the raw
completion text. A backend without a credential raises ProviderUnavailable
before doing any I/O, which is how the assistant knows to fall back to mock
mode. Backends never retry; one call per invocation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import openai
import requests

from ashpaz.config import Settings
from ashpaz.errors import EmptyCompletion, ProviderError, ProviderUnavailable
from ashpaz.prompts import PromptPayload

logger = logging.getLogger(__name__)

ERROR_DETAIL_LIMIT = 200


class CompletionBackend(ABC):
    """Common interface for all LLM providers."""

    name = "backend"

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _require_credential(self):
        if not self.available:
            raise ProviderUnavailable(f"{self.name} API key is not configured")

    @abstractmethod
    def request_completion(self, payload: PromptPayload) -> str:
        """
        Send the prompt and return the raw completion text.

        Raises:
            ProviderUnavailable: no credential configured (nothing was sent).
            ProviderError: non-success response or transport failure.
            EmptyCompletion: success response without any text.
        """


class ChatCompletionBackend(CompletionBackend):
    """
    Chat-completion protocol (OpenAI-compatible endpoints such as Groq).
    The instruction goes in the system message, the user's text in the user message.
    """

    name = "groq"

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None, timeout: float = 60,
                 client=None):
        super().__init__(api_key, model)
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = openai.OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def request_completion(self, payload: PromptPayload) -> str:
        self._require_credential()
        client = self._get_client()

        logger.debug(f"Sending {payload.mode.value} prompt to {self.name} ({self.model})...")
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": payload.instruction},
                    {"role": "user", "content": payload.user_text},
                ],
                temperature=payload.params.temperature,
                max_tokens=payload.params.max_tokens,
            )
        except openai.APIStatusError as e:
            details = str(e.message)[:ERROR_DETAIL_LIMIT]
            logger.error(f"{self.name} API error ({e.status_code}): {details}")
            raise ProviderError(f"{self.name} API error ({e.status_code})", provider_status=e.status_code,
                                details=details)
        except openai.APIError as e:
            logger.error(f"{self.name} request failed: {e}")
            raise ProviderError(f"{self.name} request failed", details=str(e)[:ERROR_DETAIL_LIMIT])

        choices = getattr(completion, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise EmptyCompletion(f"Empty response from {self.name}")
        return content


class GenerateContentBackend(CompletionBackend):
    """
    Generate-content protocol (Gemini REST API). The instruction and the
    user's text are concatenated into a single prompt.
    """

    name = "gemini"

    def __init__(self, api_key: str, model: str,
                 base_url: str = "https://generativelanguage.googleapis.com/v1beta",
                 timeout: float = 60, session: Optional[requests.Session] = None):
        super().__init__(api_key, model)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_request_body(self, payload: PromptPayload) -> dict:
        generation_config = {
            "temperature": payload.params.temperature,
            "maxOutputTokens": payload.params.max_tokens,
        }
        if payload.params.top_p is not None:
            generation_config["topP"] = payload.params.top_p
        if payload.params.top_k is not None:
            generation_config["topK"] = payload.params.top_k
        return {
            "contents": [{"parts": [{"text": payload.combined_text()}]}],
            "generationConfig": generation_config,
        }

    def request_completion(self, payload: PromptPayload) -> str:
        self._require_credential()

        model_name = self.model.split("/", 1)[1] if self.model.startswith("models/") else self.model
        url = f"{self.base_url}/models/{model_name}:generateContent"

        logger.debug(f"Sending {payload.mode.value} prompt to {self.name} ({model_name})...")
        try:
            response = self.session.post(
                url,
                headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                json=self.build_request_body(payload),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{self.name} request failed: {e}")
            raise ProviderError(f"{self.name} request failed", details=str(e)[:ERROR_DETAIL_LIMIT])

        if not response.ok:
            details = response.text[:ERROR_DETAIL_LIMIT]
            logger.error(f"{self.name} API error ({response.status_code}): {details}")
            raise ProviderError(f"{self.name} API error ({response.status_code})",
                                provider_status=response.status_code, details=details)

        try:
            data = response.json()
        except ValueError:
            raise EmptyCompletion(f"Unreadable response body from {self.name}")

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates or not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise EmptyCompletion(f"No response from {self.name}")

        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        texts = [part.get("text") for part in parts if isinstance(part, dict)]
        text = "".join(t for t in texts if isinstance(t, str))
        if not text.strip():
            raise EmptyCompletion(f"Empty response from {self.name}")
        return text


def build_chat_backend(settings: Settings) -> ChatCompletionBackend:
    return ChatCompletionBackend(
        api_key=settings.groq_api_key,
        model=settings.groq_model,
        base_url=settings.groq_base_url,
        timeout=settings.llm_timeout_seconds,
    )


def build_generate_content_backend(settings: Settings) -> GenerateContentBackend:
    return GenerateContentBackend(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.llm_timeout_seconds,
    )


BACKEND_BUILDERS = {
    "groq": build_chat_backend,
    "gemini": build_generate_content_backend,
}


def select_backend(settings: Settings) -> CompletionBackend:
    """
    Pick the completion backend once, at configuration time.

    "groq" and "gemini" force a provider. "auto" takes the first provider with a
    credential; with none configured it returns the chat backend, which then
    reports ProviderUnavailable (mock mode).
    """
    provider = (settings.llm_provider or "auto").lower()
    if provider in BACKEND_BUILDERS:
        backend = BACKEND_BUILDERS[provider](settings)
    elif provider == "auto":
        candidates = [builder(settings) for builder in BACKEND_BUILDERS.values()]
        backend = next((b for b in candidates if b.available), candidates[0])
    else:
        raise ValueError(f"Unknown LLM_PROVIDER: {settings.llm_provider!r}. Use auto, groq or gemini.")

    if backend.available:
        logger.info(f"Using {backend.name} backend with model {backend.model}")
    else:
        logger.warning("No AI provider credential configured. Running in mock mode.")
    return backend
