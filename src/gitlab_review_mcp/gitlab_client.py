"""GitLab REST client wrapper.

Provides:
- one request per call, no retries
- finite timeouts
- error translation into UpstreamError / ResponseShapeError
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import AppConfig
from .errors import ResponseShapeError, UpstreamError
from .schemas import (
    MERGE_REQUEST_VERSIONS,
    Discussion,
    DiscussionPosition,
    MergeRequest,
    MergeRequestVersion,
    parse_response,
)

logger = logging.getLogger(__name__)


def _project_path(project_id: str) -> str:
    # Namespaced ids ("group/proj") must travel as a single path segment.
    return quote(project_id, safe="")


class GitLabClient:
    """Minimal GitLab merge request client."""

    def __init__(
        self,
        *,
        config: AppConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a GitLab REST client.

        Args:
            config: Token, API base URL and timeouts.
            transport: Optional httpx transport for tests.
        """
        self._config = config
        self._api_url = config.api_url.rstrip("/")
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.access_token}",
            "Content-Type": "application/json",
        }

    def _timeout(self) -> httpx.Timeout:
        limits = self._config.limits
        return httpx.Timeout(
            timeout=limits.total_timeout_s,
            connect=limits.connect_timeout_s,
            read=limits.read_timeout_s,
        )

    async def request_json(
        self,
        *,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> object:
        """Make a single request and return decoded JSON.

        Raises:
            UpstreamError: Non-2xx status or transport failure.
            ResponseShapeError: Body is not valid JSON.
        """
        url = f"{self._api_url}{path}"

        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=self._timeout(),
            transport=self._transport,
        ) as client:
            try:
                resp = await client.request(method, url, headers=self._headers(), json=json_body)
            except httpx.HTTPError as exc:
                logger.warning("GitLab %s %s failed: %s", method, path, type(exc).__name__)
                raise UpstreamError("GitLab API error: network request failed") from exc

        logger.info("GitLab %s %s -> %s", method, path, resp.status_code)

        if not resp.is_success:
            raise UpstreamError(f"GitLab API error: {resp.reason_phrase}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            raise ResponseShapeError("GitLab returned invalid JSON") from exc

    async def get_merge_request(self, project_id: str, merge_request_iid: int) -> MergeRequest:
        data = await self.request_json(
            method="GET",
            path=f"/projects/{_project_path(project_id)}/merge_requests/{merge_request_iid}",
        )
        return parse_response(MergeRequest, data)

    async def get_merge_request_latest_version(
        self, project_id: str, merge_request_iid: int
    ) -> MergeRequestVersion:
        """Return the newest diff version.

        GitLab lists versions newest first, so the first element is returned as-is.
        """
        data = await self.request_json(
            method="GET",
            path=f"/projects/{_project_path(project_id)}/merge_requests/{merge_request_iid}/versions",
        )
        versions: list[MergeRequestVersion] = parse_response(MERGE_REQUEST_VERSIONS, data)
        if not versions:
            raise ResponseShapeError("GitLab returned no versions for this merge request")
        return versions[0]

    async def create_discussion(
        self,
        project_id: str,
        merge_request_iid: int,
        *,
        body: str,
        position: DiscussionPosition,
    ) -> Discussion:
        encoded = _project_path(project_id)
        data = await self.request_json(
            method="POST",
            path=f"/projects/{encoded}/merge_requests/{merge_request_iid}/discussions",
            json_body={
                "body": body,
                "id": encoded,
                "merge_request_iid": merge_request_iid,
                "position": position.model_dump(mode="json"),
            },
        )
        return parse_response(Discussion, data)
