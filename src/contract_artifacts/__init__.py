"""contract_artifacts: コントラクトのビルド成果物（.wasm）取得ツール.

ストレージから checksums.txt と成果物を取得し、未ビルドなら CI を起動して待機する。
"""

from contract_artifacts.config import FetchSettings, load_settings
from contract_artifacts.core.manifest import parse_checksums
from contract_artifacts.core.retry import get_with_attempts
from contract_artifacts.downloader import ArtifactDownloader
from contract_artifacts.fetcher import ArtifactFetcher, fetch_all
from contract_artifacts.github import GitHubClient
from contract_artifacts.resolver import ManifestResolver

__version__ = "0.1.0"

__all__ = [
    # config
    "FetchSettings",
    "load_settings",
    # core
    "parse_checksums",
    "get_with_attempts",
    # components
    "GitHubClient",
    "ManifestResolver",
    "ArtifactDownloader",
    "ArtifactFetcher",
    "fetch_all",
]
