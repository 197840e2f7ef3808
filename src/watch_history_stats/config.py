from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    timezone: str
    top_channels: int
    top_domains: int
    log_level: str
    config_path: str

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


DEFAULT_SETTINGS = Settings(
    timezone="UTC",
    top_channels=10,
    top_domains=10,
    log_level="INFO",
    config_path="",
)


def load_settings(load_env_file: bool = True) -> Settings:
    if load_env_file:
        load_dotenv(override=False)

    config_path = os.getenv("CONFIG_PATH") or str(Path.cwd() / "config.toml")
    config_values = _load_config(Path(config_path))

    timezone = _pick_str("TIMEZONE", "report.timezone", config_values, default=DEFAULT_SETTINGS.timezone)
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as error:
        raise RuntimeError(f"Unknown timezone in configuration: {timezone}") from error

    top_channels = _pick_int("TOP_CHANNELS", "report.top_channels", config_values, default=DEFAULT_SETTINGS.top_channels)
    top_domains = _pick_int("TOP_DOMAINS", "report.top_domains", config_values, default=DEFAULT_SETTINGS.top_domains)
    for name, value in (("TOP_CHANNELS", top_channels), ("TOP_DOMAINS", top_domains)):
        if value < 1:
            raise RuntimeError(f"Configuration value {name} must be at least 1, got {value}")

    return Settings(
        timezone=timezone,
        top_channels=top_channels,
        top_domains=top_domains,
        log_level=_pick_str("LOG_LEVEL", "runtime.log_level", config_values, default=DEFAULT_SETTINGS.log_level),
        config_path=config_path,
    )


def _load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        try:
            parsed = tomllib.load(handle)
        except tomllib.TOMLDecodeError as error:
            raise RuntimeError(f"Invalid config file {path}: {error}") from error
    return _flatten(parsed)


def _flatten(payload: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in payload.items():
        dotted = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            out.update(_flatten(value, dotted))
        else:
            out[dotted] = value
    return out


def _pick_optional(env_key: str, cfg_key: str, cfg: dict[str, Any]) -> str | None:
    env_val = os.getenv(env_key)
    if env_val not in {None, ""}:
        return env_val
    cfg_val = cfg.get(cfg_key)
    if cfg_val in {None, ""}:
        return None
    return str(cfg_val)


def _pick_str(env_key: str, cfg_key: str, cfg: dict[str, Any], default: str | None = None) -> str:
    picked = _pick_optional(env_key, cfg_key, cfg)
    if picked is None:
        return "" if default is None else default
    return picked


def _pick_int(env_key: str, cfg_key: str, cfg: dict[str, Any], default: int) -> int:
    picked = _pick_optional(env_key, cfg_key, cfg)
    if picked is None:
        return default
    try:
        return int(picked)
    except ValueError as error:
        raise RuntimeError(f"Configuration value {env_key} must be an integer, got {picked!r}") from error
