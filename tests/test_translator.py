import time

import pytest
import requests

from modlang.translator import (
    DummyTranslator,
    GoogleWebTranslator,
    MissingApiKeyError,
    OpenAITranslator,
    DeepLTranslator,
    ProviderError,
    RateLimiter,
    TranslationGateway,
    _strip_code_fences,
    build_gateway,
    build_translator,
)


class FlakyProvider:
    def __init__(self, failures: int, exc: Exception | None = None):
        self.failures = failures
        self.exc = exc or ProviderError("boom")
        self.calls = 0

    def translate(self, text: str) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return text.upper()


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_gateway_retries_until_success():
    provider = FlakyProvider(failures=2)
    gw = TranslationGateway(provider, max_retries=3, retry_delay=0)
    assert gw.translate("hi") == "HI"
    assert provider.calls == 3


def test_gateway_gives_up_after_bounded_attempts():
    provider = FlakyProvider(failures=10)
    gw = TranslationGateway(provider, max_retries=2, retry_delay=0)
    with pytest.raises(ProviderError, match="after 3 attempts"):
        gw.translate("hi")
    assert provider.calls == 3


def test_gateway_does_not_retry_unexpected_errors():
    provider = FlakyProvider(failures=1, exc=ValueError("bug"))
    gw = TranslationGateway(provider, max_retries=3, retry_delay=0)
    with pytest.raises(ValueError):
        gw.translate("hi")
    assert provider.calls == 1


def test_rate_limiter_interval():
    assert RateLimiter(requests_per_minute=60).interval == 1.0
    assert RateLimiter(requests_per_minute=600, min_interval=0.5).interval == 0.5
    assert RateLimiter().interval == 0.0


def test_rate_limiter_spaces_calls():
    limiter = RateLimiter(min_interval=0.05)
    start = time.monotonic()
    limiter.wait()
    limiter.wait()
    assert time.monotonic() - start >= 0.04


def test_google_web_translator_joins_sentences(monkeypatch):
    tr = GoogleWebTranslator()
    payload = [[["Merhaba ", "Hello ", None], ["dünya", "world", None]], None, "en"]
    monkeypatch.setattr(tr._session, "get", lambda *a, **k: FakeResponse(200, payload))
    assert tr.translate("Hello world") == "Merhaba dünya"


def test_google_web_translator_errors(monkeypatch):
    tr = GoogleWebTranslator()
    monkeypatch.setattr(tr._session, "get", lambda *a, **k: FakeResponse(429, []))
    with pytest.raises(ProviderError, match="429"):
        tr.translate("x")

    monkeypatch.setattr(tr._session, "get", lambda *a, **k: FakeResponse(200, None))
    with pytest.raises(ProviderError):
        tr.translate("x")

    def _raise(*a, **k):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(tr._session, "get", _raise)
    with pytest.raises(ProviderError, match="offline"):
        tr.translate("x")


def test_google_web_translator_empty_reply(monkeypatch):
    tr = GoogleWebTranslator()
    monkeypatch.setattr(tr._session, "get", lambda *a, **k: FakeResponse(200, [None]))
    assert tr.translate("x") == ""


def test_missing_api_keys(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("DEEPL_AUTH_KEY", raising=False)
    with pytest.raises(MissingApiKeyError):
        OpenAITranslator()
    with pytest.raises(MissingApiKeyError):
        DeepLTranslator()


def test_build_gateway_offline_and_dummy():
    assert build_gateway({"translation": {"provider": "none"}}) is None
    gw = build_gateway({"translation": {"provider": "dummy", "scheduling": {"max_retries": 1}}})
    assert isinstance(gw, TranslationGateway)
    assert isinstance(gw.provider, DummyTranslator)
    assert gw.max_retries == 1
    assert gw.translate("Stone") == "Stone"


def test_build_translator_unknown_provider():
    with pytest.raises(ValueError):
        build_translator("babelfish", {})


def test_strip_code_fences():
    assert _strip_code_fences("```text\nMerhaba\n```") == "Merhaba"
    assert _strip_code_fences("Merhaba") == "Merhaba"
