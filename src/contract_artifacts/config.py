"""Runtime settings for the artifact fetcher.

Defaults mirror the neutron-org contracts layout. A YAML file can override any
field except the CI token, which is only read from the environment.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from contract_artifacts.core.exceptions import ConfigError

GITHUB_API_BASEURL = "https://api.github.com"
NEUTRON_ORG = "neutron-org"
STORAGE_ADDR_BASE = "https://storage.googleapis.com/neutron-contracts/neutron-org"
DEFAULT_BRANCH = "neutron_audit_informal_17_01_2023"
DEFAULT_DIR = "contracts"
CI_TOKEN_ENV_NAME = "PAT_TOKEN"

BUILD_WORKFLOW_MARKER = "build.yml"
TRIGGER_REF = "main"

# 15 minutes at a 10 second delay
POLL_ATTEMPTS = (15 * 60) // 10
POLL_DELAY = 10.0


@dataclass(frozen=True)
class FetchSettings:
    org: str = NEUTRON_ORG
    github_api_base: str = GITHUB_API_BASEURL
    storage_base: str = STORAGE_ADDR_BASE
    default_branch: str = DEFAULT_BRANCH
    dest_dir: Path = Path(DEFAULT_DIR)
    workflow_marker: str = BUILD_WORKFLOW_MARKER
    trigger_ref: str = TRIGGER_REF
    ci_token: str | None = dataclasses.field(default=None, repr=False)
    verbose: bool = False
    poll_attempts: int = POLL_ATTEMPTS
    poll_delay: float = POLL_DELAY
    poll_timeout: float | None = None
    max_concurrency: int | None = None
    http_timeout: float = 60.0

    def __post_init__(self) -> None:
        if self.poll_attempts < 1:
            raise ConfigError(f"poll_attempts must be >= 1, got {self.poll_attempts}")
        if self.poll_delay < 0:
            raise ConfigError(f"poll_delay must be >= 0, got {self.poll_delay}")
        if self.poll_timeout is not None and self.poll_timeout <= 0:
            raise ConfigError(f"poll_timeout must be > 0, got {self.poll_timeout}")
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ConfigError(f"max_concurrency must be >= 1, got {self.max_concurrency}")


_FILE_KEYS = {f.name for f in dataclasses.fields(FetchSettings)} - {"ci_token", "verbose"}


def _as_path(value: Any, config_path: Path | None) -> Path:
    if not isinstance(value, (str, os.PathLike)) or str(value).strip() == "":
        where = f" in {config_path}" if config_path is not None else ""
        raise ConfigError(f"dest_dir must be a non-empty path{where}, got {value!r}")
    return Path(value)


def _load_settings_file(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Settings file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file must contain a mapping: {config_path}")

    unknown = sorted(set(data) - _FILE_KEYS)
    if unknown:
        raise ConfigError(f"Unknown settings in {config_path}: {', '.join(unknown)}")

    if "dest_dir" in data:
        data["dest_dir"] = _as_path(data["dest_dir"], config_path)

    logger.debug(f"Loaded settings from {config_path}: {sorted(data)}")
    return data


def load_settings(config_path: Path | None = None, **overrides: Any) -> FetchSettings:
    """設定を組み立てる.

    優先順位は 既定値 < 設定ファイル < 環境変数（トークン） < 明示指定（CLI）。
    値が None の明示指定は無視する。

    Args:
        config_path: YAML 設定ファイル（任意）
        **overrides: FetchSettings のフィールド名と値

    Returns:
        FetchSettings

    Raises:
        ConfigError: 設定ファイルや値が不正な場合
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_load_settings_file(Path(config_path)))

    token = os.environ.get(CI_TOKEN_ENV_NAME)
    if token:
        values["ci_token"] = token

    for key, value in overrides.items():
        if key not in _FILE_KEYS | {"ci_token", "verbose"}:
            raise ConfigError(f"Unknown setting: {key}")
        if value is not None:
            values[key] = value

    if "dest_dir" in values:
        values["dest_dir"] = _as_path(values["dest_dir"], None)

    try:
        return FetchSettings(**values)
    except TypeError as e:
        raise ConfigError(str(e)) from e
