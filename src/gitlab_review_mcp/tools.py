"""Tool catalog and dispatch layer.

This module:
- defines the fixed catalog of tools (public contract surface)
- builds the runtime from host-provided config
- validates every call's arguments before any GitLab request is made
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .config import AppConfig
from .errors import InvocationError
from .gitlab_client import GitLabClient
from .schemas import (
    CreateDiscussionInput,
    GetMergeRequestInput,
    GetMergeRequestLatestVersionInput,
    ToolCallResponse,
    json_schema_for,
    validate_arguments,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-process dependencies shared across tool calls."""

    config: AppConfig
    gitlab: GitLabClient


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """What an agent sees when it lists tools."""

    name: str
    description: str
    input_schema: dict[str, Any]


ToolHandler = Callable[[Runtime, Any], Awaitable[BaseModel]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            input_schema=json_schema_for(self.input_model),
        )


def build_runtime(config: AppConfig) -> Runtime:
    """Wire the GitLab client to an already-loaded configuration."""
    return Runtime(config=config, gitlab=GitLabClient(config=config))


async def _tool_get_merge_request(runtime: Runtime, args: GetMergeRequestInput) -> BaseModel:
    return await runtime.gitlab.get_merge_request(args.project_id, args.merge_request_iid)


async def _tool_get_merge_request_latest_version(
    runtime: Runtime, args: GetMergeRequestLatestVersionInput
) -> BaseModel:
    return await runtime.gitlab.get_merge_request_latest_version(args.project_id, args.merge_request_iid)


async def _tool_post_discussion_comment(runtime: Runtime, args: CreateDiscussionInput) -> BaseModel:
    return await runtime.gitlab.create_discussion(
        args.project_id,
        args.merge_request_iid,
        body=args.body,
        position=args.position,
    )


TOOL_CATALOG: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="get_merge_request",
        description="Get merge request details",
        input_model=GetMergeRequestInput,
        handler=_tool_get_merge_request,
    ),
    ToolSpec(
        name="get_merge_request_latest_version",
        description="Get the latest version of a merge request",
        input_model=GetMergeRequestLatestVersionInput,
        handler=_tool_get_merge_request_latest_version,
    ),
    ToolSpec(
        name="post_discussion_comment",
        description="Post a comment to a merge request discussion",
        input_model=CreateDiscussionInput,
        handler=_tool_post_discussion_comment,
    ),
)

_TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOL_CATALOG}


def list_tool_descriptors() -> list[ToolDescriptor]:
    """Return the catalog in order, with each input schema rendered."""
    return [spec.descriptor() for spec in TOOL_CATALOG]


async def dispatch_tool(runtime: Runtime, name: str, arguments: dict[str, Any] | None) -> ToolCallResponse:
    """Validate and execute a single tool call.

    Raises:
        InvocationError: Missing arguments, unknown tool, or invalid arguments.
            Raised before any GitLab request.
        UpstreamError: GitLab returned a non-success status.
        ResponseShapeError: GitLab returned a body of the wrong shape.
    """
    if arguments is None:
        raise InvocationError("Arguments are required")

    spec = _TOOLS_BY_NAME.get(name)
    if spec is None:
        raise InvocationError(f"Unknown tool: {name}")

    args = validate_arguments(spec.input_model, arguments)
    result = await spec.handler(runtime, args)
    return ToolCallResponse.from_result(result)
