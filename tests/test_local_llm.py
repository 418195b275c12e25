import io
from urllib import error

import pytest

from cortexmix.errors import LocalLLMError, TransientLLMError
from cortexmix.local_llm import _perform_ollama_request, call_ollama_chat


@pytest.mark.asyncio
async def test_call_ollama_chat_builds_payload(monkeypatch):
    captured: dict[str, object] = {}

    def fake_request(payload, base_url, timeout):
        captured["payload"] = payload
        captured["base_url"] = base_url
        captured["timeout"] = timeout
        return '{"action":"WAIT"}'

    monkeypatch.setattr("cortexmix.local_llm._perform_ollama_request", fake_request)

    result = await call_ollama_chat(
        system_prompt="System context",
        user_prompt="User payload",
        llm_model="llama3.1",
        base_url="http://localhost:11434/",
        timeout=30,
        temperature=0.3,
        max_tokens=128,
        json_mode=True,
    )

    assert result == '{"action":"WAIT"}'
    payload = captured["payload"]
    assert payload["model"] == "llama3.1"
    assert payload["stream"] is False
    assert payload["format"] == "json"
    assert payload["options"] == {"temperature": 0.3, "num_predict": 128}
    assert payload["messages"][0] == {"role": "system", "content": "System context"}
    assert payload["messages"][1] == {"role": "user", "content": "User payload"}
    assert captured["base_url"] == "http://localhost:11434"
    assert captured["timeout"] == 30


@pytest.mark.asyncio
async def test_call_ollama_chat_rejects_empty_prompt():
    with pytest.raises(LocalLLMError):
        await call_ollama_chat(system_prompt="System", user_prompt="   ", llm_model="llama3.1")


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def _http_error(code: int) -> error.HTTPError:
    return error.HTTPError(
        "http://localhost:11434/api/chat", code, "failure", {}, io.BytesIO(b"server says no")
    )


def test_perform_request_extracts_message_content(monkeypatch):
    body = b'{"message": {"role": "assistant", "content": "hello"}}'
    monkeypatch.setattr("cortexmix.local_llm.request.urlopen", lambda req, timeout: _FakeResponse(body))

    assert _perform_ollama_request({"model": "m"}, "http://localhost:11434", 5) == "hello"


def test_perform_request_missing_content_is_empty(monkeypatch):
    monkeypatch.setattr(
        "cortexmix.local_llm.request.urlopen", lambda req, timeout: _FakeResponse(b'{"message": {}}')
    )

    assert _perform_ollama_request({"model": "m"}, "http://localhost:11434", 5) == ""


@pytest.mark.parametrize("code, expected", [(503, TransientLLMError), (429, TransientLLMError), (404, LocalLLMError)])
def test_perform_request_classifies_http_errors(monkeypatch, code, expected):
    def fake_urlopen(req, timeout):
        raise _http_error(code)

    monkeypatch.setattr("cortexmix.local_llm.request.urlopen", fake_urlopen)

    with pytest.raises(expected) as excinfo:
        _perform_ollama_request({"model": "m"}, "http://localhost:11434", 5)
    assert str(code) in str(excinfo.value)


def test_perform_request_unreachable_server(monkeypatch):
    def fake_urlopen(req, timeout):
        raise error.URLError("connection refused")

    monkeypatch.setattr("cortexmix.local_llm.request.urlopen", fake_urlopen)

    with pytest.raises(LocalLLMError, match="Could not reach Ollama"):
        _perform_ollama_request({"model": "m"}, "http://localhost:11434", 5)
