"""
Artifact downloader.

Streams every artifact listed in a manifest from storage into the
destination directory, all requests in flight at once unless a
concurrency limit is configured.
"""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

import httpx

from contract_artifacts.config import FetchSettings
from contract_artifacts.core.exceptions import UnsafeArtifactPathError
from contract_artifacts.reporter import Reporter
from contract_artifacts.storage import artifact_url

_CHUNK_SIZE = 65536


def resolve_artifact_path(dest_dir: Path, filename: str) -> Path:
    """
    Map a manifest filename to a path inside ``dest_dir``.

    A leading "/" is treated as relative to ``dest_dir``, like the plain
    ``<dest>/<filename>`` join. Names that still resolve outside ``dest_dir``
    (``../`` segments) are rejected.

    Raises:
        UnsafeArtifactPathError: the name escapes ``dest_dir``
    """
    root = dest_dir.resolve()
    target = (root / filename.lstrip("/")).resolve()
    if target == root or not target.is_relative_to(root):
        raise UnsafeArtifactPathError(filename, dest_dir)
    return dest_dir / target.relative_to(root)


class ArtifactDownloader:
    """
    Downloads contract artifacts for one repository and commit.

    Either every file is written or the first error propagates and the
    remaining downloads are cancelled. Files that sibling downloads already
    wrote are left in place.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: FetchSettings,
        reporter: Reporter,
    ):
        """
        Initialize the artifact downloader.

        Args:
            client: Shared HTTP client
            settings: Storage location and concurrency limit
            reporter: Logger for progress and verbose details
        """
        self.client = client
        self.settings = settings
        self.reporter = reporter

    async def download_file(self, file_url: str, output_path: Path) -> None:
        """
        Stream one file to disk.

        Args:
            file_url: Storage URL of the artifact
            output_path: Destination file path
        """
        self.reporter.detail(f"Downloading file by url: {file_url}")
        async with self.client.stream("GET", file_url) as response:
            response.raise_for_status()
            output_path.parent.mkdir(parents=True, exist_ok=True)
            # file I/O runs in a worker thread so sibling downloads keep streaming
            f = await asyncio.to_thread(open, output_path, "wb")
            try:
                async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                    await asyncio.to_thread(f.write, chunk)
            finally:
                await asyncio.to_thread(f.close)

    async def download_contracts(
        self,
        repo_name: str,
        contracts_list: list[str],
        commit_hash: str,
        dest_dir: Path,
    ) -> list[Path]:
        """
        Download all artifacts concurrently.

        Args:
            repo_name: Repository the artifacts were built from
            contracts_list: Artifact filenames, in manifest order
            commit_hash: Commit the artifacts were built at
            dest_dir: Directory to write the files into

        Returns:
            Paths of the written files, in the order of ``contracts_list``

        Raises:
            UnsafeArtifactPathError: a filename escapes ``dest_dir`` (nothing is downloaded)
            httpx.HTTPError: the first failed download; the others are cancelled
        """
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        targets = [(name, resolve_artifact_path(dest_dir, name)) for name in contracts_list]

        limit = self.settings.max_concurrency
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def fetch_one(filename: str, file_path: Path) -> Path:
            url = artifact_url(self.settings, repo_name, commit_hash, filename)
            async with semaphore or contextlib.nullcontext():
                await self.download_file(url, file_path)
            return file_path

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(fetch_one(name, path)) for name, path in targets]
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None
        return [t.result() for t in tasks]
