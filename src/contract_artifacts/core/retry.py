"""固定間隔ポーリング（Bounded Retry Executor）.

取得関数と受理判定を、判定が通るか試行回数を使い切るまで繰り返す。
何をポーリングしているかは関知しない。
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger

from .exceptions import AttemptsExhaustedError, PollingTimeoutError

T = TypeVar("T")

DEFAULT_ATTEMPTS = 20
DEFAULT_DELAY = 10.0


def _render(value: Any) -> str:
    if isinstance(value, (dict, list)):
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


async def _poll(
    get_func: Callable[[], Awaitable[T]],
    ready_func: Callable[[T], Awaitable[bool]],
    num_attempts: int,
    delay: float,
    sleep: Callable[[float], Awaitable[Any]],
) -> T:
    error: Exception | None = None
    data: Any = None
    remaining = num_attempts
    while remaining > 0:
        remaining -= 1
        try:
            data = await get_func()
            if await ready_func(data):
                return data
        except Exception as e:
            error = e
        if remaining == 0:
            break
        logger.info(f"{remaining * delay:g} seconds left")
        await sleep(delay)

    if error is not None:
        raise error
    raise AttemptsExhaustedError(
        f"get_with_attempts: no attempts left. Latest get response: {_render(data)}",
        last_value=data,
    )


async def get_with_attempts(
    get_func: Callable[[], Awaitable[T]],
    ready_func: Callable[[T], Awaitable[bool]],
    num_attempts: int = DEFAULT_ATTEMPTS,
    *,
    delay: float = DEFAULT_DELAY,
    timeout: float | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """取得と判定を繰り返し、受理された値を返す.

    試行の間は ``delay`` 秒だけ固定で待機する（バックオフ・ジッタなし）。
    成功した試行の後と最後の試行の後には待機しない。

    Args:
        get_func: 引数なしの非同期取得関数
        ready_func: 取得値を受理するかを返す非同期判定関数
        num_attempts: 最大試行回数
        delay: 試行間の待機秒数
        timeout: ループ全体の壁時計上限（秒）。None なら試行回数のみで打ち切る
        sleep: 待機関数（テスト用に差し替え可能）

    Returns:
        受理された取得値

    Raises:
        AttemptsExhaustedError: 例外は一度も起きず、判定が最後まで通らなかった場合
        PollingTimeoutError: ``timeout`` を超過した場合
        Exception: 最後に記録された取得関数の例外
    """
    if num_attempts < 1:
        raise ValueError(f"num_attempts must be >= 1, got {num_attempts}")

    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            return await _poll(get_func, ready_func, num_attempts, delay, sleep)
    except TimeoutError as e:
        # 取得関数自身が送出した TimeoutError はそのまま伝播させる
        if not deadline.expired():
            raise
        raise PollingTimeoutError(f"get_with_attempts: deadline of {timeout:g} seconds exceeded") from e
