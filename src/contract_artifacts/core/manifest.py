"""checksums.txt からのアーティファクト名抽出."""

from __future__ import annotations

import re

CHECKSUMS_FILENAME = "checksums.txt"

# 空白を含まない連続文字列のうち ".wasm" で終わる最長部分
_WASM_PATTERN = re.compile(r"\S+\.wasm")


def parse_checksums(checksums_txt: str | None) -> list[str]:
    """マニフェスト本文から .wasm ファイル名を出現順に抽出する.

    重複はそのまま残す。``x.wasmfile`` のような語は ``x.wasm`` として一致する。

    Args:
        checksums_txt: checksums.txt の本文

    Returns:
        ファイル名のリスト（一致なしの場合は空リスト）
    """
    if not checksums_txt:
        return []
    return _WASM_PATTERN.findall(checksums_txt)


def format_contracts_list(contracts: list[str]) -> str:
    return "\n".join(f"\t{c}" for c in contracts)
