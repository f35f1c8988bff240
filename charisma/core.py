"""
Charisma — core.py
Code generation against the Mistral chat API.
- One user message per request, no conversation memory
- The model is told to answer with bare code; a stray outer ``` fence is removed
"""
from __future__ import annotations

import re, time
from dataclasses import dataclass
from typing import Any, Optional

from mistralai import Mistral

from charisma.config import CharismaConfig
from charisma.errors import GenerationError
from charisma.formatters import get_formatter
from charisma.log import get_logger

log = get_logger("core")

INSTRUCTION = (
    "generate code in {language} based on this prompt: {prompt} "
    "and return just the raw code with no backticks"
)

_FENCE = re.compile(r"\A\s*```[^\n]*\n(?P<body>.*?)\n?```\s*\Z", re.S)


@dataclass
class CodeResponse:
    code: str
    language: str
    model: str
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: int = 0


def build_instruction(prompt: str, language: str) -> str:
    return INSTRUCTION.format(language=language, prompt=prompt)


def strip_fence(text: str) -> str:
    m = _FENCE.match(text)
    return m.group("body") if m else text


def _content_text(content: Any) -> str:
    if content is None: return ""
    if isinstance(content, str): return content
    # newer SDKs may hand back a list of typed chunks
    parts = []
    for chunk in content:
        t = getattr(chunk, "text", None)
        if t is None and isinstance(chunk, dict): t = chunk.get("text")
        if t: parts.append(t)
    return "".join(parts)


class CodeGenerator:
    def __init__(self, config: CharismaConfig, client: Optional[Any] = None):
        self.config = config
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise GenerationError(
                    "No API key set.\n"
                    "  Export MISTRAL_API_KEY or add it to a .env file"
                )
            self._client = Mistral(api_key=self.config.api_key)
        return self._client

    def generate(self, prompt: str, language: str) -> CodeResponse:
        get_formatter(language)
        client = self._get_client()
        model = self.config.model
        log.info("generating %s code with %s (%d char prompt)", language, model, len(prompt))

        t_start = time.time()
        try:
            resp = client.chat.complete(
                model=model,
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": build_instruction(prompt, language)}],
            )
            choice = resp.choices[0]
            text = _content_text(choice.message.content)
        except GenerationError:
            raise
        except Exception as exc:
            log.error("generation failed: %s", exc)
            raise GenerationError(str(exc) or exc.__class__.__name__) from exc

        code = strip_fence(text)
        if not code.strip():
            log.error("model %s returned no code", model)
            raise GenerationError("The model returned an empty response")

        usage = getattr(resp, "usage", None)
        out = CodeResponse(
            code=code, language=language, model=model,
            tokens_in=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_out=getattr(usage, "completion_tokens", 0) or 0,
            latency_ms=int((time.time() - t_start) * 1000),
        )
        log.info("generated %d lines in %dms (%d tokens in, %d out)",
                 len(code.splitlines()), out.latency_ms, out.tokens_in, out.tokens_out)
        return out
