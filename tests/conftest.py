from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest
from loguru import logger

from contract_artifacts.config import FetchSettings

API = "https://api.github.test"
STORAGE = "https://storage.test/bucket/org"
ORG = "org"


class FakeRemote:
    """URL ごとに応答を返す httpx.MockTransport 用のハンドラ.

    URL は httpx と同じ正規化をかけてから照合する。
    同じ URL に複数の応答を登録すると順番に返し、最後の応答を以降も返し続ける。
    未登録の URL には 404 を返す。受信したリクエストはすべて記録する。
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, *responses: Any) -> None:
        self.routes.setdefault((method, str(httpx.URL(url))), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, str(request.url)))
        if not queue:
            return httpx.Response(404, text="Not Found")
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        status, kwargs = entry
        return httpx.Response(status, **kwargs)

    @staticmethod
    def ok(**kwargs: Any) -> tuple[int, dict]:
        return 200, kwargs

    @staticmethod
    def status(code: int, **kwargs: Any) -> tuple[int, dict]:
        return code, kwargs

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())

    def calls(self, method: str, url: str) -> int:
        return sum(1 for r in self.requests if r.method == method and str(r.url) == str(httpx.URL(url)))


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def settings(tmp_path: Path) -> FetchSettings:
    return FetchSettings(
        org=ORG,
        github_api_base=API,
        storage_base=STORAGE,
        dest_dir=tmp_path / "contracts",
        ci_token="secret-token",
        poll_attempts=3,
        poll_delay=0,
    )


@pytest.fixture
def log_messages() -> list[str]:
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
