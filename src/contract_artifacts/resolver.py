"""checksums.txt の取得と、存在しない場合のビルド起動・待機."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from contract_artifacts.config import FetchSettings
from contract_artifacts.core.exceptions import BuildTriggerError, CITokenMissingError
from contract_artifacts.core.retry import get_with_attempts
from contract_artifacts.github import GitHubClient
from contract_artifacts.reporter import Reporter
from contract_artifacts.storage import checksums_url


class ManifestResolver:
    """ストレージ上の checksums.txt を返す.

    見つからなければ GitHub Actions のビルドを起動し、
    マニフェストが現れるまで固定間隔でポーリングする。
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        github: GitHubClient,
        settings: FetchSettings,
        reporter: Reporter,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.github = github
        self.settings = settings
        self.reporter = reporter
        self._sleep = sleep

    async def _get(self, url: str) -> httpx.Response:
        resp = await self.client.get(url)
        resp.raise_for_status()
        return resp

    async def _trigger(self, repo_name: str, commit_hash: str) -> None:
        try:
            await self.github.trigger_contracts_building(repo_name, commit_hash)
        except CITokenMissingError:
            raise
        except Exception as e:
            # 例外の内容は PAT トークンを含み得るので verbose 時のみ出力する
            self.reporter.detail(repr(e))
            if self.settings.verbose:
                raise BuildTriggerError() from e
            raise BuildTriggerError() from None

    async def get_checksums_txt(self, repo_name: str, commit_hash: str) -> str:
        """checksums.txt の本文を返す.

        Args:
            repo_name: リポジトリ名
            commit_hash: 対象コミット

        Returns:
            マニフェスト本文（そのまま）

        Raises:
            CITokenMissingError: ビルド起動が必要だがトークンがない場合
            BuildTriggerError: ビルド起動に失敗した場合（ポーリングは行わない）
            AttemptsExhaustedError: ポーリングで 200 が得られなかった場合
        """
        url = checksums_url(self.settings, repo_name, commit_hash)
        self.reporter.detail(f"Getting checksums by url: {url}")

        try:
            return (await self._get(url)).text
        except httpx.HTTPError as e:
            self.reporter.detail(f"Checksums fetch failed: {e!r}")
            self.reporter.info("No checksum file found, launching the building workflow")

        await self._trigger(repo_name, commit_hash)

        async def is_ready(resp: httpx.Response) -> bool:
            return resp.status_code == 200

        resp = await get_with_attempts(
            lambda: self._get(url),
            is_ready,
            self.settings.poll_attempts,
            delay=self.settings.poll_delay,
            timeout=self.settings.poll_timeout,
            sleep=self._sleep,
        )
        return resp.text
