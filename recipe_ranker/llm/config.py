from __future__ import annotations

from dataclasses import dataclass, field

from ..env import env_float, env_str


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = field(default_factory=lambda: env_str("GROQ_API_KEY"))
    model: str = field(default_factory=lambda: env_str("LLM_MODEL", "llama-3.3-70b-versatile"))
    base_url: str | None = field(default_factory=lambda: env_str("LLM_BASE_URL") or None)
    timeout: float = field(default_factory=lambda: env_float("LLM_TIMEOUT_SECONDS", 30.0))
    temperature: float = 0.2
    max_tokens: int = 256
