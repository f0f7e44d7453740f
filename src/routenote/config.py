"""Configuration loading with merge order defaults -> routenote.toml -> env -> CLI."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

CONFIG_FILENAME = "routenote.toml"
ENV_BASE_URL = "ROUTENOTE_BASE_URL"
DEFAULT_BASE_URL = "https://localhost:{port}"
PORT_TOKEN = "{port}"


class RoutenoteConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = DEFAULT_BASE_URL
    include: tuple[str, ...] = ("**/*.java",)
    exclude_dirs: tuple[str, ...] = ()

    def render_base_url(self, port: str) -> str:
        return render_base_url(self.base_url, port)


def render_base_url(template: str, port: str) -> str:
    return template.replace(PORT_TOKEN, port)


@dataclass(frozen=True)
class CliOverrides:
    """Command-line values, applied at highest precedence."""

    base_url: Optional[str] = None


def load_config_file(repo_root: Path) -> dict[str, object]:
    """Load optional routenote.toml from the workspace root."""
    config_path = repo_root / CONFIG_FILENAME
    if not config_path.is_file():
        return {}
    with config_path.open("rb") as handle:
        try:
            payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"{CONFIG_FILENAME} is not valid TOML: {exc}") from exc
    return payload


def load_effective_config(
    repo_root: Path,
    overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
) -> RoutenoteConfig:
    env = os.environ if environ is None else environ
    overrides = overrides or CliOverrides()

    payload: dict[str, object] = dict(load_config_file(repo_root))
    if env.get(ENV_BASE_URL):
        payload["base_url"] = env[ENV_BASE_URL]
    if overrides.base_url:
        payload["base_url"] = overrides.base_url

    try:
        return RoutenoteConfig.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ValueError(f"Invalid routenote config field(s): {fields}\n{exc}") from exc
