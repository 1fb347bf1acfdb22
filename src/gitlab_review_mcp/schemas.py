"""Schema registry: tool inputs, GitLab responses, and the result envelope.

Each shape is declared once as a pydantic model. The same model validates
untrusted input (``model_validate``) and is rendered into the JSON Schema
advertised to agents (``model_json_schema``).
"""

from __future__ import annotations

import json
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .errors import InvocationError, ResponseShapeError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _ToolInput(BaseModel):
    """Strict base for agent-supplied arguments: no coercion, no unknown fields."""

    model_config = ConfigDict(strict=True, extra="forbid")


class _GitLabResponse(BaseModel):
    """Base for GitLab bodies: keep the declared subset, drop the rest."""

    model_config = ConfigDict(strict=True, extra="ignore")


# Tool inputs


class GetMergeRequestInput(_ToolInput):
    project_id: str
    merge_request_iid: int


class GetMergeRequestLatestVersionInput(_ToolInput):
    project_id: str
    merge_request_iid: int


class DiscussionPosition(_ToolInput):
    """Diff position a discussion is anchored to."""

    base_sha: str
    head_sha: str
    start_sha: str
    new_path: str
    old_path: str
    new_line: int | None
    old_line: int | None
    position_type: Literal["text"]


class CreateDiscussionInput(_ToolInput):
    project_id: str
    merge_request_iid: int
    position: DiscussionPosition
    body: str


# GitLab responses


class MergeRequest(_GitLabResponse):
    id: int
    iid: int
    project_id: int
    title: str
    description: str
    source_branch: str
    target_branch: str


class MergeRequestVersion(_GitLabResponse):
    id: int
    head_commit_sha: str
    base_commit_sha: str
    start_commit_sha: str
    created_at: str
    merge_request_id: int
    state: str
    real_size: str
    patch_id_sha: str


class Discussion(_GitLabResponse):
    id: str


MERGE_REQUEST_VERSIONS = TypeAdapter(list[MergeRequestVersion])


# Result envelope


class TextPayload(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResponse(BaseModel):
    """Uniform success envelope for every tool."""

    content: list[TextPayload]

    @classmethod
    def from_result(cls, result: BaseModel) -> "ToolCallResponse":
        return cls(content=[TextPayload(text=to_pretty_json(result))])


def json_schema_for(model: type[BaseModel]) -> dict[str, Any]:
    """Render a model as a portable JSON Schema document."""
    return model.model_json_schema()


def format_validation_errors(exc: ValidationError) -> str:
    """Join every failing field path with its reason, comma-separated."""
    parts = []
    for err in exc.errors():
        path = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{path}: {err['msg']}")
    return ", ".join(parts)


def validate_arguments(model: type[ModelT], arguments: Any) -> ModelT:
    """Validate raw tool arguments.

    Raises:
        InvocationError: Listing every violated field path and its reason.
    """
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise InvocationError(f"Invalid arguments: {format_validation_errors(exc)}") from exc


def parse_response(model: type[ModelT] | TypeAdapter, data: Any) -> Any:
    """Parse a decoded GitLab body against its response shape.

    Raises:
        ResponseShapeError: If the body does not conform.
    """
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(data)
        return model.model_validate(data)
    except ValidationError as exc:
        raise ResponseShapeError(f"Unexpected GitLab response: {format_validation_errors(exc)}") from exc


def to_pretty_json(result: BaseModel) -> str:
    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)
