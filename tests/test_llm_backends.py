# flake8: noqa
from types import SimpleNamespace

import httpx
import openai
import pytest
import requests

from ashpaz.config import Settings
from ashpaz.errors import EmptyCompletion, ProviderError, ProviderUnavailable
from ashpaz.llm_backends import ChatCompletionBackend, GenerateContentBackend, select_backend
from ashpaz.prompts import PromptMode, assemble_prompt


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_openai_client(content=None, error=None):
    completions = FakeCompletions(content, error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def recipe_payload():
    return assemble_prompt("tea", PromptMode.FULL_RECIPE)


# --- chat completion (Groq) ---------------------------------------------------

def test_chat_backend_sends_system_and_user_messages(recipe_payload):
    client, completions = fake_openai_client(content='{"title": "Tea"}')
    backend = ChatCompletionBackend("key", "model-x", client=client)

    assert backend.request_completion(recipe_payload) == '{"title": "Tea"}'
    call = completions.calls[0]
    assert call["model"] == "model-x"
    assert call["messages"][0] == {"role": "system", "content": recipe_payload.instruction}
    assert call["messages"][1] == {"role": "user", "content": "tea"}
    assert call["temperature"] == recipe_payload.params.temperature
    assert call["max_tokens"] == recipe_payload.params.max_tokens


def test_chat_backend_without_key_makes_no_call(recipe_payload):
    client, completions = fake_openai_client(content="x")
    backend = ChatCompletionBackend("", "model-x", client=client)
    with pytest.raises(ProviderUnavailable):
        backend.request_completion(recipe_payload)
    assert completions.calls == []


def test_chat_backend_maps_status_errors(recipe_payload):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    error = openai.APIStatusError("rate limited", response=httpx.Response(429, request=request), body=None)
    client, _ = fake_openai_client(error=error)
    backend = ChatCompletionBackend("key", "model-x", client=client)

    with pytest.raises(ProviderError) as exc_info:
        backend.request_completion(recipe_payload)
    assert exc_info.value.provider_status == 429
    assert exc_info.value.to_payload() == {"error": "Recipe generation failed", "status": 429}


def test_chat_backend_maps_connection_errors(recipe_payload):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    client, _ = fake_openai_client(error=openai.APIConnectionError(request=request))
    backend = ChatCompletionBackend("key", "model-x", client=client)

    with pytest.raises(ProviderError) as exc_info:
        backend.request_completion(recipe_payload)
    assert exc_info.value.provider_status is None


@pytest.mark.parametrize("content", [None, "", "   "])
def test_chat_backend_empty_content(recipe_payload, content):
    client, _ = fake_openai_client(content=content)
    with pytest.raises(EmptyCompletion):
        ChatCompletionBackend("key", "model-x", client=client).request_completion(recipe_payload)


# --- generate content (Gemini) --------------------------------------------------

def test_generate_content_request_shape():
    payload = assemble_prompt("pasta", PromptMode.TITLE_SUGGESTIONS, seed="1")
    session = FakeSession(FakeResponse(payload=gemini_reply('["A"]')))
    backend = GenerateContentBackend("gkey", "models/gemini-test", base_url="https://example.test/v1beta/",
                                     session=session)

    assert backend.request_completion(payload) == '["A"]'
    url, kwargs = session.calls[0]
    assert url == "https://example.test/v1beta/models/gemini-test:generateContent"
    assert kwargs["headers"]["x-goog-api-key"] == "gkey"
    body = kwargs["json"]
    assert body["contents"][0]["parts"][0]["text"] == payload.combined_text()
    assert body["generationConfig"] == {"temperature": 1.2, "maxOutputTokens": 256, "topP": 0.95, "topK": 40}


def test_generate_content_omits_unset_sampling_params(recipe_payload):
    backend = GenerateContentBackend("gkey", "gemini-test", session=FakeSession())
    config = backend.build_request_body(recipe_payload)["generationConfig"]
    assert "topP" not in config and "topK" not in config


def test_generate_content_joins_parts(recipe_payload):
    reply = {"candidates": [{"content": {"parts": [{"text": '{"title": '}, {"text": '"Tea"}'}]}}]}
    backend = GenerateContentBackend("gkey", "gemini-test", session=FakeSession(FakeResponse(payload=reply)))
    assert backend.request_completion(recipe_payload) == '{"title": "Tea"}'


def test_generate_content_http_error(recipe_payload):
    session = FakeSession(FakeResponse(status_code=503, text="overloaded" * 100))
    backend = GenerateContentBackend("gkey", "gemini-test", session=session)
    with pytest.raises(ProviderError) as exc_info:
        backend.request_completion(recipe_payload)
    assert exc_info.value.provider_status == 503
    assert len(exc_info.value.details) == 200


def test_generate_content_transport_error(recipe_payload):
    session = FakeSession(error=requests.ConnectionError("boom"))
    backend = GenerateContentBackend("gkey", "gemini-test", session=session)
    with pytest.raises(ProviderError):
        backend.request_completion(recipe_payload)


@pytest.mark.parametrize("reply", [
    {},
    {"candidates": []},
    {"candidates": ["oops"]},
    {"candidates": [{"content": {"parts": [{"text": None}]}}]},
    {"candidates": [{"content": {"parts": "text"}}]},
    gemini_reply("  "),
])
def test_generate_content_empty(recipe_payload, reply):
    backend = GenerateContentBackend("gkey", "gemini-test", session=FakeSession(FakeResponse(payload=reply)))
    with pytest.raises(EmptyCompletion):
        backend.request_completion(recipe_payload)


def test_generate_content_without_key(recipe_payload):
    session = FakeSession(FakeResponse(payload=gemini_reply("x")))
    with pytest.raises(ProviderUnavailable):
        GenerateContentBackend("", "gemini-test", session=session).request_completion(recipe_payload)
    assert session.calls == []


# --- selection -------------------------------------------------------------------

def test_auto_prefers_configured_provider():
    assert select_backend(Settings(gemini_api_key="g")).name == "gemini"
    assert select_backend(Settings(groq_api_key="k", gemini_api_key="g")).name == "groq"


def test_auto_without_keys_is_mock_mode():
    backend = select_backend(Settings())
    assert not backend.available


def test_forced_provider():
    backend = select_backend(Settings(llm_provider="gemini", groq_api_key="k"))
    assert backend.name == "gemini"
    assert not backend.available


def test_unknown_provider():
    with pytest.raises(ValueError):
        select_backend(Settings(llm_provider="llama"))


def test_generate_content_skips_null_parts(recipe_payload):
    reply = {"candidates": [{"content": {"parts": [{"text": None}, {"text": "Tea"}]}}]}
    backend = GenerateContentBackend("gkey", "gemini-test", session=FakeSession(FakeResponse(payload=reply)))
    assert backend.request_completion(recipe_payload) == "Tea"
