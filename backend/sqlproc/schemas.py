"""
Pydantic schemas for the procedure-run API.

Field names follow the orchestrator's camelCase JSON (``databaseName``,
``storedProcedureName``, ``customOutput``); Python code uses snake_case.
Grammar checks live in ``core.validate`` so that they surface as
``InvalidInput`` rather than as request-shape errors.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Parameter(BaseModel):
    """One script parameter. ``type`` is VARCHAR or NUMBER; optional for inline markers."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str | None = None
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _number_to_str(cls, v: Any) -> Any:
        # JSON numbers are accepted and bound by their textual form
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ScriptReference(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    database_name: str = Field(..., min_length=1, alias="databaseName")
    schema_name: str = Field(..., min_length=1, alias="schemaName")
    stored_procedure_name: str = Field(..., min_length=1, alias="storedProcedureName")

    @property
    def storage_key(self) -> str:
        """Relative key ``{database}/{schema}/{procedure}.sql`` in the script store."""
        return f"{self.database_name}/{self.schema_name}/{self.stored_procedure_name}.sql"


class ProcedureRequest(ScriptReference):
    """Body for POST /procedures/run.

    ``parameters`` is either a list of ``{name, type, value}`` objects or a
    plain ``{name: value}`` object; the latter keeps key order and carries no
    types, so it only suits scripts with inline markers.
    """

    parameters: list[Parameter] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _parameters_from_mapping(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("parameters"), dict):
            data = dict(data)
            data["parameters"] = [
                {"name": name, "value": value}
                for name, value in data["parameters"].items()
            ]
        return data

    @property
    def reference(self) -> ScriptReference:
        return ScriptReference(
            database_name=self.database_name,
            schema_name=self.schema_name,
            stored_procedure_name=self.stored_procedure_name,
        )


class ProcedureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    custom_output: dict[str, str] = Field(default_factory=dict, alias="customOutput")
