"""Schema registry tests: strict validation and advertised JSON Schema."""

from __future__ import annotations

import copy
import json

import jsonschema
import pytest
from gitlab_review_mcp.errors import InvocationError, ResponseShapeError
from gitlab_review_mcp.schemas import (
    CreateDiscussionInput,
    GetMergeRequestInput,
    MergeRequest,
    ToolCallResponse,
    json_schema_for,
    parse_response,
    validate_arguments,
)

VALID_DISCUSSION = {
    "project_id": "group/proj",
    "merge_request_iid": 7,
    "body": "Consider extracting this.",
    "position": {
        "base_sha": "aaa",
        "head_sha": "bbb",
        "start_sha": "ccc",
        "new_path": "src/app.py",
        "old_path": "src/app.py",
        "new_line": 12,
        "old_line": None,
        "position_type": "text",
    },
}


def test_valid_discussion_produces_typed_record() -> None:
    args = validate_arguments(CreateDiscussionInput, VALID_DISCUSSION)

    assert args.merge_request_iid == 7
    assert args.position.new_line == 12
    assert args.position.old_line is None
    assert args.position.position_type == "text"


def test_position_type_must_be_text() -> None:
    bad = copy.deepcopy(VALID_DISCUSSION)
    bad["position"]["position_type"] = "image"

    with pytest.raises(InvocationError) as exc:
        validate_arguments(CreateDiscussionInput, bad)

    assert exc.value.message.startswith("Invalid arguments: ")
    assert "position.position_type" in exc.value.message


def test_nullable_lines_are_still_required() -> None:
    bad = copy.deepcopy(VALID_DISCUSSION)
    del bad["position"]["old_line"]

    with pytest.raises(InvocationError) as exc:
        validate_arguments(CreateDiscussionInput, bad)

    assert "position.old_line" in exc.value.message


def test_every_violated_path_is_reported() -> None:
    with pytest.raises(InvocationError) as exc:
        validate_arguments(GetMergeRequestInput, {"project_id": 5})

    message = exc.value.message
    assert "project_id: " in message
    assert "merge_request_iid: " in message
    assert ", " in message


@pytest.mark.parametrize("iid", ["42", True, 4.2])
def test_integers_are_not_coerced(iid: object) -> None:
    with pytest.raises(InvocationError):
        validate_arguments(GetMergeRequestInput, {"project_id": "g/p", "merge_request_iid": iid})


def test_unknown_input_fields_are_rejected() -> None:
    with pytest.raises(InvocationError) as exc:
        validate_arguments(GetMergeRequestInput, {"project_id": "g/p", "merge_request_iid": 1, "extra": 1})

    assert "extra" in exc.value.message


def test_non_mapping_arguments_are_rejected() -> None:
    with pytest.raises(InvocationError):
        validate_arguments(GetMergeRequestInput, ["g/p", 1])


def test_advertised_schema_accepts_what_the_model_accepts() -> None:
    schema = json_schema_for(CreateDiscussionInput)

    jsonschema.Draft202012Validator.check_schema(schema)
    jsonschema.validate(VALID_DISCUSSION, schema)
    validate_arguments(CreateDiscussionInput, VALID_DISCUSSION)


def test_advertised_schema_rejects_wrong_position_type() -> None:
    bad = copy.deepcopy(VALID_DISCUSSION)
    bad["position"]["position_type"] = "file"

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(bad, json_schema_for(CreateDiscussionInput))


def test_advertised_schema_lists_required_fields() -> None:
    schema = json_schema_for(GetMergeRequestInput)

    assert schema["type"] == "object"
    assert set(schema["required"]) == {"project_id", "merge_request_iid"}
    assert schema["properties"]["merge_request_iid"]["type"] == "integer"
    assert schema["additionalProperties"] is False


def test_response_keeps_declared_subset_only() -> None:
    mr = parse_response(
        MergeRequest,
        {
            "id": 1,
            "iid": 2,
            "project_id": 3,
            "title": "t",
            "description": "d",
            "source_branch": "feature",
            "target_branch": "main",
            "web_url": "https://gitlab.com/g/p/-/merge_requests/2",
        },
    )

    assert "web_url" not in mr.model_dump()


def test_response_shape_mismatch_raises_response_shape_error() -> None:
    with pytest.raises(ResponseShapeError) as exc:
        parse_response(MergeRequest, {"id": "not-an-int"})

    assert exc.value.code == "ResponseShape"


def test_envelope_wraps_pretty_json() -> None:
    mr = MergeRequest(
        id=1, iid=2, project_id=3, title="Ünïcode", description="", source_branch="a", target_branch="b"
    )

    response = ToolCallResponse.from_result(mr)

    assert len(response.content) == 1
    assert response.content[0].type == "text"
    assert response.content[0].text == json.dumps(mr.model_dump(), indent=2, ensure_ascii=False)
    assert "Ünïcode" in response.content[0].text
