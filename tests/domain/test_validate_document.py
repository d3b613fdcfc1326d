from __future__ import annotations

from typing import Any

from domain.models import FdlDocument
from domain.services.validate_document import validate_document
from tests.helpers.fdl_fixtures import load_fdl_fixture


def test_consistent_document_is_valid(hd_payload: dict[str, Any]) -> None:
    report = validate_document(hd_payload)

    assert report.is_valid
    assert report.errors == []
    assert report.schema_errors == ()
    assert report.id_tree_errors == ()


def test_model_instances_are_validated_through_their_serialized_form() -> None:
    report = validate_document(load_fdl_fixture("hd_capture.fdl"))

    assert report.is_valid


def test_duplicate_intent_and_dangling_reference_give_exactly_two_errors(
    broken_payload: dict[str, Any],
) -> None:
    report = validate_document(broken_payload)

    assert not report.is_valid
    assert report.schema_errors == ()
    assert len(report.id_tree_errors) == 2
    messages = [issue.message for issue in report.id_tree_errors]
    assert "ID duplicated at /framing_intents/0 and /framing_intents/1" in messages[0]
    assert "Framing Intent ID ghost not in framing_intents" in messages[1]
    assert all(error.startswith("ID Tree Error: ") for error in report.errors)


def test_validation_is_deterministic(broken_payload: dict[str, Any]) -> None:
    first = validate_document(broken_payload)
    second = validate_document(broken_payload)

    assert first == second
    assert first.errors == second.errors


def test_schema_pass_collects_every_error(hd_payload: dict[str, Any]) -> None:
    hd_payload["uuid"] = "not-a-uuid"
    hd_payload["framing_intents"][0]["protection"] = 150
    hd_payload["contexts"][0]["canvases"][0]["dimensions"]["width"] = 0
    hd_payload["canvas_templates"][0]["fit_method"] = "stretch"

    report = validate_document(hd_payload)

    paths = {issue.path for issue in report.schema_errors}
    assert paths == {
        "/uuid",
        "/framing_intents/0/protection",
        "/contexts/0/canvases/0/dimensions/width",
        "/canvas_templates/0/fit_method",
    }
    assert report.id_tree_errors == ()
    assert not report.is_valid
    assert all(error.startswith("Schema Error: ") for error in report.errors)


def test_schema_pass_reports_missing_required_fields(hd_payload: dict[str, Any]) -> None:
    del hd_payload["version"]
    del hd_payload["framing_intents"][1]["aspect_ratio"]

    report = validate_document(hd_payload)

    messages = [issue.describe() for issue in report.schema_errors]
    assert "/ 'version' is a required property" in messages
    assert "/framing_intents/1 'aspect_ratio' is a required property" in messages


def test_schema_pass_rejects_unknown_version(hd_payload: dict[str, Any]) -> None:
    hd_payload["version"] = {"major": 2, "minor": 0}

    report = validate_document(hd_payload)

    assert [issue.path for issue in report.schema_errors] == ["/version/major"]


def test_dangling_default_framing_intent(hd_payload: dict[str, Any]) -> None:
    hd_payload["default_framing_intent"] = "missing"

    report = validate_document(hd_payload)

    assert report.errors == ["ID Tree Error: Default Framing Intent missing: Not in framing_intents"]


def test_decision_id_must_combine_canvas_and_intent(hd_payload: dict[str, Any]) -> None:
    hd_payload["contexts"][0]["canvases"][0]["framing_decisions"][1]["id"] = "cam_a-wide"

    report = validate_document(hd_payload)

    assert len(report.id_tree_errors) == 1
    assert report.id_tree_errors[0].path == "/contexts/0/canvases/0/framing_decisions/1/id"
    assert "doesn't match expected cam_a-scope" in report.id_tree_errors[0].message


def test_duplicate_canvas_ids_name_both_locations(hd_payload: dict[str, Any]) -> None:
    canvas = hd_payload["contexts"][0]["canvases"][0]
    hd_payload["contexts"].append({"label": "Camera Setup 2", "canvases": [dict(canvas, framing_decisions=[])]})

    report = validate_document(hd_payload)

    assert len(report.id_tree_errors) == 1
    assert report.id_tree_errors[0].message.endswith(
        "ID duplicated at /contexts/0/canvases/0 and /contexts/1/canvases/0"
    )


def test_duplicate_decision_ids_are_reported(hd_payload: dict[str, Any]) -> None:
    decisions = hd_payload["contexts"][0]["canvases"][0]["framing_decisions"]
    decisions.append(dict(decisions[0]))

    report = validate_document(hd_payload)

    assert len(report.id_tree_errors) == 1
    assert "Framing Decision cam_a-hd_4x3: ID duplicated" in report.id_tree_errors[0].message


def test_unknown_source_canvas(hd_payload: dict[str, Any]) -> None:
    hd_payload["contexts"][0]["canvases"][0]["source_canvas_id"] = "cam_z"

    report = validate_document(hd_payload)

    assert report.errors == ["ID Tree Error: Source Canvas IDs [cam_z] not in canvases"]


def test_duplicate_canvas_template_ids(hd_payload: dict[str, Any]) -> None:
    hd_payload["canvas_templates"].append(dict(hd_payload["canvas_templates"][0], label="Copy"))

    report = validate_document(hd_payload)

    assert [issue.path for issue in report.id_tree_errors] == ["/canvas_templates/1"]


def test_id_tree_pass_survives_malformed_containers() -> None:
    payload = {
        "uuid": "3f2b8c1e-5a4d-4e6f-9b7a-2c1d0e9f8a7b",
        "version": {"major": 1, "minor": 0},
        "framing_intents": [{"id": ["not", "a", "string"]}, "junk"],
        "contexts": "oops",
    }

    report = validate_document(payload)

    assert report.id_tree_errors == ()
    assert report.schema_errors
    assert not report.is_valid


def test_empty_document_is_valid() -> None:
    document = FdlDocument(uuid="3f2b8c1e-5a4d-4e6f-9b7a-2c1d0e9f8a7b")

    assert validate_document(document).is_valid


def test_report_to_dict(broken_payload: dict[str, Any]) -> None:
    data = validate_document(broken_payload).to_dict()

    assert data["is_valid"] is False
    assert data["schema_errors"] == []
    assert len(data["id_tree_errors"]) == 2
    assert data["errors"] == validate_document(broken_payload).errors
