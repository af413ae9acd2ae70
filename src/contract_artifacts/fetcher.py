"""Per-repository orchestration: commit → checksums.txt → artifacts."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any

import httpx

from contract_artifacts.config import FetchSettings
from contract_artifacts.core.manifest import format_contracts_list, parse_checksums
from contract_artifacts.downloader import ArtifactDownloader
from contract_artifacts.github import GitHubClient
from contract_artifacts.reporter import Reporter
from contract_artifacts.resolver import ManifestResolver


class ArtifactFetcher:
    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: FetchSettings,
        reporter: Reporter | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.reporter = reporter or Reporter(settings.verbose)
        self.github = GitHubClient(client, settings, self.reporter)
        self.resolver = ManifestResolver(client, self.github, settings, self.reporter, sleep=sleep)
        self.downloader = ArtifactDownloader(client, settings, self.reporter)

    async def download_artifacts(
        self,
        repo_name: str,
        branch_name: str | None,
        commit_hash: str | None,
        dest_dir: Path,
    ) -> list[Path]:
        """1リポジトリ分のアーティファクトを取得する.

        Returns:
            書き出したファイルのパス。checksums.txt が空ならスキップして空リスト
        """
        self.reporter.info(f"Downloading artifacts for {repo_name} repo")

        if commit_hash:
            self.reporter.info(f"Using specified commit: {commit_hash}")
        else:
            branch_name = branch_name or self.settings.default_branch
            commit_hash = await self.github.get_latest_commit(repo_name, branch_name)
            self.reporter.info(f"Using branch {branch_name}")
            self.reporter.info(f"The latest commit is: {commit_hash}")

        self.reporter.detail("Downloading checksum.txt")
        checksums_txt = await self.resolver.get_checksums_txt(repo_name, commit_hash)

        if not checksums_txt:
            self.reporter.info("Respective checksum.txt is not found in storage")
            return []

        contracts_list = parse_checksums(checksums_txt)
        self.reporter.info(f"Contracts to be downloaded:\n{format_contracts_list(contracts_list)}")

        written = await self.downloader.download_contracts(repo_name, contracts_list, commit_hash, dest_dir)

        self.reporter.info(f'Contracts are downloaded to the "{dest_dir}" dir\n')
        return written


def _http_client(settings: FetchSettings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=settings.http_timeout,
        headers={"User-Agent": "contract-artifacts"},
        transport=transport,
    )


async def fetch_all(
    repos: Sequence[str],
    settings: FetchSettings,
    branch_name: str | None = None,
    commit_hash: str | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> dict[str, list[Path]] | None:
    """指定リポジトリを順番に処理する.

    branch と commit の両方が指定された場合はメッセージを出して何もしない。
    どちらもなければ既定ブランチを使う。途中のリポジトリで失敗した場合、
    以降のリポジトリは処理されない。

    Args:
        repos: リポジトリ名のリスト
        settings: 実行設定
        branch_name: 対象ブランチ
        commit_hash: 対象コミット
        transport: httpx のトランスポート（テスト用）
        sleep: ポーリング時の待機関数（テスト用）

    Returns:
        リポジトリ名 -> 書き出したファイルのリスト。設定エラー時は None
    """
    reporter = Reporter(settings.verbose)

    if branch_name and commit_hash:
        reporter.info("Both branch and commit hash are specified, exiting. Please specify only a single thing.")
        return None
    if not branch_name and not commit_hash:
        branch_name = settings.default_branch

    results: dict[str, list[Path]] = {}
    async with _http_client(settings, transport) as client:
        fetcher = ArtifactFetcher(client, settings, reporter, sleep=sleep)
        for repo_name in repos:
            results[repo_name] = await fetcher.download_artifacts(
                repo_name, branch_name, commit_hash, settings.dest_dir
            )
    return results
