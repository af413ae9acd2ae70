"""ネットワークに依存しないコア処理群.

- 例外階層
- 固定間隔ポーリング
- checksums.txt の解析
"""

from .exceptions import (
    ArtifactsError,
    AttemptsExhaustedError,
    BuildTriggerError,
    CITokenMissingError,
    ConfigError,
    DispatchStatusError,
    PollingTimeoutError,
    UnsafeArtifactPathError,
    WorkflowNotFoundError,
)
from .manifest import CHECKSUMS_FILENAME, format_contracts_list, parse_checksums
from .retry import get_with_attempts

__all__ = [
    "ArtifactsError",
    "AttemptsExhaustedError",
    "BuildTriggerError",
    "CITokenMissingError",
    "ConfigError",
    "DispatchStatusError",
    "PollingTimeoutError",
    "UnsafeArtifactPathError",
    "WorkflowNotFoundError",
    "CHECKSUMS_FILENAME",
    "format_contracts_list",
    "parse_checksums",
    "get_with_attempts",
]
