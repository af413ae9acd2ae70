"""Artifact fetcher exceptions.

カスタム例外クラスを定義します。
"""

from __future__ import annotations

from typing import Any


class ArtifactsError(Exception):
    """contract_artifacts が送出する例外の基底クラス."""


class ConfigError(ArtifactsError):
    """設定ファイルまたは設定値が不正な場合の例外."""


class WorkflowNotFoundError(ArtifactsError):
    """ビルド用ワークフローがリポジトリに存在しない場合の例外.

    Attributes:
        repo_name: 対象リポジトリ名
        marker: ワークフローの path に含まれるべき文字列
    """

    def __init__(self, repo_name: str, marker: str) -> None:
        self.repo_name = repo_name
        self.marker = marker
        super().__init__(f"Build workflow not found for {repo_name} (no workflow path contains '{marker}')")


class BuildTriggerError(ArtifactsError):
    """ビルドのトリガーに失敗した場合の例外.

    トークン漏洩を避けるため、メッセージには下位エラーの詳細を含めない。
    """

    def __init__(self, message: str = "Error during build triggering") -> None:
        super().__init__(message)


class CITokenMissingError(BuildTriggerError):
    """ビルドのトリガーが必要なのに CI トークンが設定されていない場合の例外."""

    def __init__(self) -> None:
        super().__init__("CI token isn't provided, can't trigger the build")


class DispatchStatusError(BuildTriggerError):
    """workflow dispatch が 204 以外を返した場合の例外.

    Attributes:
        status_code: 実際に返された HTTP ステータス
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Wrong return code: {status_code}")


class AttemptsExhaustedError(ArtifactsError):
    """ポーリングの試行回数を使い切った場合の例外.

    Attributes:
        last_value: 最後に取得した値（一度も取得できなかった場合は None）
    """

    def __init__(self, message: str, last_value: Any = None) -> None:
        self.last_value = last_value
        super().__init__(message)


class PollingTimeoutError(AttemptsExhaustedError):
    """ポーリングが壁時計の期限を超えた場合の例外."""


class UnsafeArtifactPathError(ArtifactsError):
    """マニフェストのファイル名が保存先ディレクトリの外を指す場合の例外.

    Attributes:
        filename: マニフェストに記載されたファイル名
        dest_dir: 保存先ディレクトリ
    """

    def __init__(self, filename: str, dest_dir: object) -> None:
        self.filename = filename
        self.dest_dir = dest_dir
        super().__init__(f"Artifact path escapes destination directory {dest_dir}: {filename}")
