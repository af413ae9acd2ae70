"""GitHubClient のユニットテスト."""

from __future__ import annotations

import asyncio
import dataclasses
import json

import httpx
import pytest

from contract_artifacts.config import FetchSettings
from contract_artifacts.core.exceptions import (
    CITokenMissingError,
    DispatchStatusError,
    WorkflowNotFoundError,
)
from contract_artifacts.github import GitHubClient
from contract_artifacts.reporter import Reporter

WORKFLOWS = {
    "total_count": 2,
    "workflows": [
        {"id": 11, "path": ".github/workflows/lint.yml"},
        {"id": 42, "path": ".github/workflows/build.yml"},
    ],
}


def _repo_url(settings: FetchSettings, repo: str) -> str:
    return f"{settings.github_api_base}/repos/{settings.org}/{repo}"


def _run(remote, settings: FetchSettings, call):
    async def go():
        async with remote.client() as client:
            gh = GitHubClient(client, settings, Reporter(settings.verbose))
            return await call(gh)

    return asyncio.run(go())


class TestGetLatestCommit:
    def test_returns_branch_head_sha(self, remote, settings: FetchSettings) -> None:
        remote.add(
            "GET",
            f"{_repo_url(settings, 'contracts')}/branches/main",
            remote.ok(json={"name": "main", "commit": {"sha": "abc123"}}),
        )

        sha = _run(remote, settings, lambda gh: gh.get_latest_commit("contracts", "main"))

        assert sha == "abc123"
        assert "Authorization" not in remote.requests[0].headers

    def test_missing_branch_raises(self, remote, settings: FetchSettings) -> None:
        with pytest.raises(httpx.HTTPStatusError):
            _run(remote, settings, lambda gh: gh.get_latest_commit("contracts", "nope"))


class TestBuildWorkflowId:
    def test_finds_workflow_by_path_marker(self, remote, settings: FetchSettings) -> None:
        remote.add("GET", f"{_repo_url(settings, 'contracts')}/actions/workflows", remote.ok(json=WORKFLOWS))

        assert _run(remote, settings, lambda gh: gh.get_build_workflow_id("contracts")) == 42

    def test_no_matching_workflow(self, remote, settings: FetchSettings) -> None:
        remote.add(
            "GET",
            f"{_repo_url(settings, 'contracts')}/actions/workflows",
            remote.ok(json={"workflows": [{"id": 11, "path": ".github/workflows/lint.yml"}]}),
        )

        with pytest.raises(WorkflowNotFoundError, match="build.yml"):
            _run(remote, settings, lambda gh: gh.get_build_workflow_id("contracts"))


class TestTriggerContractsBuilding:
    def test_dispatch_payload_and_auth(self, remote, settings: FetchSettings) -> None:
        """dispatch に trigger ref と commit、Bearer トークンが渡ること."""
        base = _repo_url(settings, "contracts")
        remote.add("GET", f"{base}/actions/workflows", remote.ok(json=WORKFLOWS))
        remote.add("POST", f"{base}/actions/workflows/42/dispatches", remote.status(204))

        _run(remote, settings, lambda gh: gh.trigger_contracts_building("contracts", "deadbeef"))

        dispatch = remote.requests[-1]
        assert dispatch.method == "POST"
        assert dispatch.headers["Authorization"] == "Bearer secret-token"
        assert json.loads(dispatch.content) == {"ref": "main", "inputs": {"branch": "deadbeef"}}

    def test_missing_token_makes_no_requests(self, remote, settings: FetchSettings) -> None:
        no_token = dataclasses.replace(settings, ci_token=None)

        with pytest.raises(CITokenMissingError, match="CI token isn't provided"):
            _run(remote, no_token, lambda gh: gh.trigger_contracts_building("contracts", "deadbeef"))

        assert remote.requests == []

    @pytest.mark.parametrize("code", [200, 201, 202, 404, 422, 500])
    def test_non_204_is_failure(self, remote, settings: FetchSettings, code: int) -> None:
        """204 以外は 2xx でも失敗扱いになること."""
        base = _repo_url(settings, "contracts")
        remote.add("GET", f"{base}/actions/workflows", remote.ok(json=WORKFLOWS))
        remote.add("POST", f"{base}/actions/workflows/42/dispatches", remote.status(code, json={}))

        with pytest.raises(DispatchStatusError, match="Wrong return code") as exc_info:
            _run(remote, settings, lambda gh: gh.trigger_contracts_building("contracts", "deadbeef"))

        assert exc_info.value.status_code == code
