"""Error types raised by the dispatcher and the GitLab client.

Every failure is raised, never returned inside a success envelope. The MCP
transport turns a raised error into an error result for the agent.
"""

from __future__ import annotations


class GitLabReviewError(Exception):
    """Base error; ``message`` is safe to show to agents."""

    code = "Internal"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(GitLabReviewError):
    """Missing or invalid host configuration. Fatal at startup."""

    code = "Config"


class InvocationError(GitLabReviewError):
    """Malformed tool call: no arguments, unknown tool, or invalid arguments."""

    code = "UserInput"


class UpstreamError(GitLabReviewError):
    """GitLab answered with a non-success status, or could not be reached."""

    code = "GitLab"


class ResponseShapeError(GitLabReviewError):
    """GitLab answered, but the body does not match the expected shape."""

    code = "ResponseShape"
