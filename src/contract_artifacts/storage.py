"""Storage bucket path layout: ``<base>/<repo>/<commit>/<filename>``."""

from __future__ import annotations

from contract_artifacts.config import FetchSettings
from contract_artifacts.core.manifest import CHECKSUMS_FILENAME


def artifact_url(settings: FetchSettings, repo_name: str, commit_hash: str, filename: str) -> str:
    base = settings.storage_base.rstrip("/")
    return f"{base}/{repo_name}/{commit_hash}/{filename}"


def checksums_url(settings: FetchSettings, repo_name: str, commit_hash: str) -> str:
    return artifact_url(settings, repo_name, commit_hash, CHECKSUMS_FILENAME)
