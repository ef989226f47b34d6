"""Configuration loader for relay_alerts."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from common.cli_helpers import parse_csv_list
from common.config import find_config_path, load_yaml, require_env

load_dotenv()

CONFIG_DIR = Path(__file__).parent / "configs"

DEFAULT_SOURCES = [
    "https://service.cbs.tw/public/upload/files/json/{year}_earthquakeew.json",
]
COMMIT_MODES = ("concurrent", "before_dispatch")


@dataclass(frozen=True)
class FormatConfig:
    base_url: str = "https://cbs.tw/"
    page_key_unique_length: int = 10
    obfuscate_domains: tuple[str, ...] = ("cbs.tw",)
    separator: str = "\n---\n"


@dataclass(frozen=True)
class Config:
    lambda_arn: str
    webhooks: tuple[str, ...] = ()
    sources: tuple[str, ...] = tuple(DEFAULT_SOURCES)
    timezone: str = "Asia/Taipei"
    tag_prefix: str = "alertType_"
    drill_markers: tuple[str, ...] = ("演練", "演習")
    request_timeout: int = 10
    commit_mode: str = "concurrent"
    format: FormatConfig = field(default_factory=FormatConfig)


def load_config(config_name: str | None = None) -> Config:
    """Load configuration from the named YAML file plus the environment.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded Config object
    """
    config_path = find_config_path(config_name, CONFIG_DIR, env_var="CONFIG_ENV")
    return parse_config(load_yaml(config_path), os.environ)


def parse_config(data: dict, env) -> Config:
    """Parse a config dictionary and environment mapping into a Config object."""
    fmt = data.get("format", {})
    format_config = FormatConfig(
        base_url=fmt.get("base_url", "https://cbs.tw/"),
        page_key_unique_length=int(fmt.get("page_key_unique_length", 10)),
        obfuscate_domains=tuple(fmt.get("obfuscate_domains", ["cbs.tw"])),
        separator=fmt.get("separator", "\n---\n"),
    )

    commit_mode = data.get("commit_mode", "concurrent")
    if commit_mode not in COMMIT_MODES:
        raise ValueError(f"Unknown commit_mode {commit_mode!r}, expected one of {COMMIT_MODES}")

    # SOURCE_URLS takes precedence over the file
    sources = parse_csv_list(env.get("SOURCE_URLS")) or data.get("sources") or DEFAULT_SOURCES

    drill_markers = tuple(data.get("drill_markers", ["演練", "演習"]))
    if not drill_markers:
        raise ValueError("drill_markers must not be empty")

    return Config(
        lambda_arn=require_env("LAMBDA_ARN", env),
        webhooks=tuple(parse_csv_list(env.get("SLACK_WEBHOOKS"))),
        sources=tuple(sources),
        timezone=data.get("timezone", "Asia/Taipei"),
        tag_prefix=data.get("tag_prefix", "alertType_"),
        drill_markers=drill_markers,
        request_timeout=int(data.get("request_timeout", 10)),
        commit_mode=commit_mode,
        format=format_config,
    )

