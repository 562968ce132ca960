from __future__ import annotations

import logging
import os
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import requests


SYSTEM_PROMPT_MARKER_TRANSLATION = """\
You are a professional video game localizer. You WILL translate Minecraft mod interface text from {source} into {target}.
The text contains opaque markers such as <FMT0/>, <CLR1/>, <PH2/>, <NUM3/> and __NOUN4__.
Copy every marker exactly as written, keep it where the grammar of the target language needs it, and never translate, renumber, remove or add markers.
Write natural, concise {target} suitable for tooltips and menus. Return only the translated text (no explanations, no quotes)."""


class ProviderError(RuntimeError):
    """Raised when a translation provider fails (transport, quota, malformed reply)."""


class MissingApiKeyError(RuntimeError):
    """Raised when a required provider API key is missing."""


class BaseTranslator(Protocol):
    def translate(self, text: str) -> str:
        ...


class RateLimiter:
    """Thread-safe minimum delay between two dispatches.

    Either ``requests_per_minute`` or ``min_interval`` (seconds) may be given;
    the stricter of the two wins.
    """

    def __init__(self, requests_per_minute: Optional[int] = None, min_interval: float = 0.0):
        self.requests_per_minute = requests_per_minute or 0
        rpm_interval = 60.0 / self.requests_per_minute if self.requests_per_minute > 0 else 0.0
        self.interval = max(rpm_interval, float(min_interval or 0.0))
        self._lock = threading.Lock()
        self._last_ts = 0.0

    def wait(self) -> None:
        if self.interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            delta = now - self._last_ts
            if delta < self.interval:
                time.sleep(self.interval - delta)
            self._last_ts = time.monotonic()


class GoogleWebTranslator:
    """
    Free Google Translate web endpoint (``client=gtx``).

    No key required; heavily rate limited, so pair it with a RateLimiter.
    """

    base_url = "https://translate.googleapis.com/translate_a/single"

    def __init__(self, source_lang: str = "en", target_lang: str = "tr", timeout: float = 10.0):
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": "Mozilla/5.0"})

    def translate(self, text: str) -> str:
        params = {"client": "gtx", "sl": self.source_lang, "tl": self.target_lang, "dt": "t", "q": text}
        try:
            resp = self._session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderError(f"Google Translate request failed: {exc}") from exc
        if resp.status_code != 200:
            raise ProviderError(f"Google Translate HTTP {resp.status_code} (possibly blocked)")
        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError("Google Translate returned a non-JSON reply") from exc
        if not data or not isinstance(data, list) or not data[0]:
            return ""
        return "".join(part[0] for part in data[0] if part and part[0])


@dataclass
class OpenAIConfig:
    model: str = "gpt-4.1-mini"
    temperature: float = 0.3
    max_output_tokens: int = 1000


class OpenAITranslator:
    """
    OpenAI translator that uses a strict prompt to preserve markers.

    Requires:
      - `openai` python package
      - OPENAI_API_KEY in env or provided.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        cfg: Optional[OpenAIConfig] = None,
        source_lang: str = "English",
        target_lang: str = "Turkish",
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY", "")
        if not self.api_key:
            raise MissingApiKeyError("OPENAI_API_KEY missing: set the environment variable or add it to your .env.")
        self.cfg = cfg or OpenAIConfig()
        self.system_prompt = SYSTEM_PROMPT_MARKER_TRANSLATION.format(source=source_lang, target=target_lang)

        import openai  # type: ignore

        self._openai = openai
        self._client = openai.OpenAI(api_key=self.api_key)

    def translate(self, text: str) -> str:
        try:
            resp = self._client.chat.completions.create(
                model=self.cfg.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": text},
                ],
                temperature=self.cfg.temperature,
                max_tokens=self.cfg.max_output_tokens,
            )
        except self._openai.OpenAIError as exc:
            raise ProviderError(f"OpenAI request failed: {exc}") from exc

        content = resp.choices[0].message.content or ""
        return _strip_code_fences(content).strip()


class DeepLTranslator:
    """
    DeepL translator with tag_handling="xml" so the self-closing markers survive.

    Requires:
      - `deepl` python package
      - DEEPL_AUTH_KEY in env or provided.
    """

    def __init__(
        self,
        auth_key: Optional[str] = None,
        source_lang: str = "EN",
        target_lang: str = "TR",
        formality: str = "default",
        preserve_formatting: bool = True,
    ):
        self.auth_key = auth_key or os.getenv("DEEPL_AUTH_KEY", "")
        if not self.auth_key:
            raise MissingApiKeyError("DEEPL_AUTH_KEY missing: set the environment variable or add it to your .env.")
        self.source_lang = source_lang.upper()
        self.target_lang = target_lang.upper()
        self.formality = formality
        self.preserve_formatting = preserve_formatting

        import deepl  # type: ignore

        self._deepl_module = deepl
        self._deepl = deepl.Translator(self.auth_key)

    def translate(self, text: str) -> str:
        try:
            result = self._deepl.translate_text(
                text,
                source_lang=self.source_lang,
                target_lang=self.target_lang,
                tag_handling="xml",
                preserve_formatting=self.preserve_formatting,
                formality=self.formality,
            )
        except self._deepl_module.DeepLException as exc:
            raise ProviderError(f"DeepL request failed: {exc}") from exc
        return str(result)


class DummyTranslator:
    """Offline translator for testing/dev. Does not translate; returns the text unchanged."""

    def translate(self, text: str) -> str:
        return text


def _strip_code_fences(s: str) -> str:
    fence = re.compile(r"^\s*```(?:\w+)?\s*([\s\S]*?)\s*```\s*$")
    m = fence.match(s.strip())
    return m.group(1) if m else s


class TranslationGateway:
    """Wraps a provider with a bounded retry policy and dispatch pacing.

    ``translate`` raises ProviderError once every attempt has failed.
    """

    def __init__(
        self,
        provider: BaseTranslator,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        rate_limiter: Optional[RateLimiter] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.provider = provider
        self.max_retries = max(0, int(max_retries))
        self.retry_delay = retry_delay
        self.rate_limiter = rate_limiter
        self.logger = logger

    def translate(self, text: str) -> str:
        attempts = self.max_retries + 1
        last_exc: Optional[ProviderError] = None
        for attempt in range(attempts):
            if self.rate_limiter:
                self.rate_limiter.wait()
            try:
                return self.provider.translate(text)
            except ProviderError as exc:
                last_exc = exc
                if attempt < attempts - 1:
                    # only the first failure is worth a line; the rest repeat it
                    if self.logger and attempt == 0:
                        self.logger.warning("Provider call failed, retrying (%s attempts left): %s", attempts - 1, exc)
                    time.sleep(self.retry_delay)
        raise ProviderError(f"{last_exc} (after {attempts} attempts)") from last_exc


def build_translator(provider: str, cfg: Dict[str, Any]) -> BaseTranslator:
    """Instantiate the provider named in ``translation.provider``."""

    provider = provider.lower()
    tcfg = cfg.get("translation", {})
    source_lang = tcfg.get("source_lang", "en")
    target_lang = tcfg.get("target_lang", "tr")
    if provider == "google":
        gcfg = tcfg.get("google", {})
        return GoogleWebTranslator(
            source_lang=source_lang,
            target_lang=target_lang,
            timeout=float(gcfg.get("timeout", 10.0)),
        )
    if provider == "openai":
        ocfg = tcfg.get("openai", {})
        return OpenAITranslator(
            cfg=OpenAIConfig(
                model=ocfg.get("model", "gpt-4.1-mini"),
                temperature=float(ocfg.get("temperature", 0.3)),
                max_output_tokens=int(ocfg.get("max_output_tokens", 1000)),
            ),
            source_lang=ocfg.get("source_language_name", "English"),
            target_lang=ocfg.get("target_language_name", "Turkish"),
        )
    if provider == "deepl":
        dcfg = tcfg.get("deepl", {})
        return DeepLTranslator(
            source_lang=source_lang,
            target_lang=target_lang,
            formality=dcfg.get("formality", "default"),
            preserve_formatting=bool(dcfg.get("preserve_formatting", True)),
        )
    if provider == "dummy":
        return DummyTranslator()
    raise ValueError(f"Unknown translation provider: {provider}")


def build_gateway(cfg: Dict[str, Any], logger: Optional[logging.Logger] = None) -> Optional[TranslationGateway]:
    """Build the gateway from config; ``None`` when ``translation.provider`` is "none" (offline)."""

    tcfg = cfg.get("translation", {})
    provider = str(tcfg.get("provider", "google")).lower()
    if provider in ("none", "offline", ""):
        return None
    sched = tcfg.get("scheduling", {})
    limiter = RateLimiter(
        requests_per_minute=int(sched.get("requests_per_minute", 0)),
        min_interval=float(sched.get("min_dispatch_delay", 0.0)),
    )
    return TranslationGateway(
        build_translator(provider, cfg),
        max_retries=int(sched.get("max_retries", 3)),
        retry_delay=float(sched.get("retry_delay_seconds", 1.0)),
        rate_limiter=limiter,
        logger=logger,
    )
