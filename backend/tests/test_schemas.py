"""Tests for request/response schemas."""

import pytest
from pydantic import ValidationError

from sqlproc.schemas import Parameter, ProcedureRequest, ProcedureResponse

BODY = {
    "databaseName": "ADF_DEMO",
    "schemaName": "TRIPPIN",
    "storedProcedureName": "LOAD_PEOPLE",
}


def test_parameters_default_empty() -> None:
    req = ProcedureRequest.model_validate(BODY)
    assert req.parameters == []
    assert req.reference.storage_key == "ADF_DEMO/TRIPPIN/LOAD_PEOPLE.sql"


def test_parameters_list_form() -> None:
    req = ProcedureRequest.model_validate(
        {**BODY, "parameters": [{"name": "AGE", "type": "NUMBER", "value": 10}]}
    )
    assert req.parameters == [Parameter(name="AGE", type="NUMBER", value="10")]


def test_parameters_mapping_form_keeps_order() -> None:
    req = ProcedureRequest.model_validate(
        {**BODY, "parameters": {"FIRST_NAME": "Foo", "AGE": 10}}
    )
    assert [(p.name, p.value, p.type) for p in req.parameters] == [
        ("FIRST_NAME", "Foo", None),
        ("AGE", "10", None),
    ]


@pytest.mark.parametrize("field", ["databaseName", "schemaName", "storedProcedureName"])
def test_reference_fields_required(field: str) -> None:
    body = {k: v for k, v in BODY.items() if k != field}
    with pytest.raises(ValidationError):
        ProcedureRequest.model_validate(body)
    with pytest.raises(ValidationError):
        ProcedureRequest.model_validate({**BODY, field: ""})


def test_boolean_value_not_coerced() -> None:
    with pytest.raises(ValidationError):
        Parameter.model_validate({"name": "FLAG", "value": True})


def test_response_serialised_by_alias() -> None:
    resp = ProcedureResponse(custom_output={"A": "1"})
    assert resp.model_dump(by_alias=True) == {"customOutput": {"A": "1"}}
