from __future__ import annotations

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel

DEFAULT_PROVIDER = "gemini"
DEFAULT_MODELS: dict[str, str] = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-5.2",
}


class Settings(BaseModel):
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODELS[DEFAULT_PROVIDER]
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    export_dir: str = "."

    @property
    def api_key(self) -> str | None:
        if self.provider == "openai":
            return self.openai_api_key
        if self.provider == "gemini":
            return self.gemini_api_key
        return None

    @property
    def api_key_env(self) -> str:
        return "OPENAI_API_KEY" if self.provider == "openai" else "GEMINI_API_KEY"


def _load_config_file() -> dict[str, object]:
    candidates = [Path.cwd() / "cyberguard.toml", Path.home() / ".config/cyberguard/config.toml"]
    for candidate in candidates:
        if not candidate.exists():
            continue
        try:
            return tomllib.loads(candidate.read_text(encoding="utf-8"))
        except Exception:
            continue
    return {}


def _read_optional_str(payload: dict[str, object], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def load_settings(
    *,
    provider: str | None = None,
    model: str | None = None,
) -> Settings:
    payload: dict[str, object] = _load_config_file()

    resolved_provider = (
        provider
        or os.getenv("CYBERGUARD_PROVIDER")
        or _read_optional_str(payload, "provider")
        or DEFAULT_PROVIDER
    )
    resolved_model = (
        model
        or os.getenv("CYBERGUARD_MODEL")
        or _read_optional_str(payload, "model")
        or DEFAULT_MODELS.get(resolved_provider, DEFAULT_MODELS[DEFAULT_PROVIDER])
    )

    return Settings(
        provider=resolved_provider,
        model=resolved_model,
        gemini_api_key=(
            os.getenv("GEMINI_API_KEY")
            or os.getenv("API_KEY")
            or _read_optional_str(payload, "gemini_api_key")
        ),
        openai_api_key=os.getenv("OPENAI_API_KEY") or _read_optional_str(payload, "openai_api_key"),
        export_dir=(
            os.getenv("CYBERGUARD_EXPORT_DIR") or _read_optional_str(payload, "export_dir") or "."
        ),
    )
