"""GitHub REST API: branch lookup and build workflow dispatch."""

from __future__ import annotations

from typing import Any

import httpx

from contract_artifacts.config import FetchSettings
from contract_artifacts.core.exceptions import (
    CITokenMissingError,
    DispatchStatusError,
    WorkflowNotFoundError,
)
from contract_artifacts.reporter import Reporter

_ACCEPT = "application/vnd.github+json"


class GitHubClient:
    """Read-only lookups are anonymous; only the dispatch carries the token."""

    def __init__(self, client: httpx.AsyncClient, settings: FetchSettings, reporter: Reporter) -> None:
        self.client = client
        self.settings = settings
        self.reporter = reporter

    def _repo_url(self, repo_name: str) -> str:
        base = self.settings.github_api_base.rstrip("/")
        return f"{base}/repos/{self.settings.org}/{repo_name}"

    async def _get_json(self, url: str) -> Any:
        resp = await self.client.get(url, headers={"Accept": _ACCEPT})
        resp.raise_for_status()
        return resp.json()

    async def get_latest_commit(self, repo_name: str, branch_name: str) -> str:
        """Return the head commit sha of ``branch_name``.

        Raises:
            httpx.HTTPStatusError: the branch or repository does not exist
        """
        url = f"{self._repo_url(repo_name)}/branches/{branch_name}"
        self.reporter.detail(f"Getting latest commit by url:\n{url}")
        data = await self._get_json(url)
        return data["commit"]["sha"]

    async def get_build_workflow_id(self, repo_name: str) -> int:
        url = f"{self._repo_url(repo_name)}/actions/workflows"
        data = await self._get_json(url)
        marker = self.settings.workflow_marker
        for workflow in data.get("workflows", []):
            if marker in workflow.get("path", ""):
                return workflow["id"]
        raise WorkflowNotFoundError(repo_name, marker)

    async def trigger_contracts_building(self, repo_name: str, commit_hash: str) -> None:
        """Dispatch the build workflow for ``commit_hash``.

        Anything other than ``204 No Content`` counts as a failure.

        Raises:
            CITokenMissingError: no CI token is configured (checked before any request)
            WorkflowNotFoundError: the repository has no build workflow
            DispatchStatusError: the dispatch returned a status other than 204
        """
        ci_token = self.settings.ci_token
        if not ci_token:
            self.reporter.warning("No CI token provided")
            raise CITokenMissingError()

        workflow_id = await self.get_build_workflow_id(repo_name)
        self.reporter.detail(f"Using workflow id {workflow_id}")

        url = f"{self._repo_url(repo_name)}/actions/workflows/{workflow_id}/dispatches"
        resp = await self.client.post(
            url,
            json={
                "ref": self.settings.trigger_ref,
                "inputs": {"branch": commit_hash},
            },
            headers={
                "Accept": _ACCEPT,
                "Authorization": f"Bearer {ci_token}",
            },
        )
        if resp.status_code != 204:
            raise DispatchStatusError(resp.status_code)
