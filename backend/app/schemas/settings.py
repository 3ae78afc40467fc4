"""Settings schemas: generic key/value entries and document numbering."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NumberingSettings(BaseModel):
    """Per-document-type numbering configuration.

    Persisted with the camelCase keys (``startNumber``, ``paddingLength``,
    ``includeYear``, ``resetOnNewYear``) through field aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    prefix: str = Field(..., min_length=1, max_length=20, pattern=r"^[A-Za-z]+$")
    start_number: int = Field(1, ge=0, alias="startNumber")
    padding_length: int = Field(4, ge=0, le=20, alias="paddingLength")
    include_year: bool = Field(True, alias="includeYear")
    reset_on_new_year: bool = Field(True, alias="resetOnNewYear")


class NextNumberRead(BaseModel):
    document_type: str
    next_number: str


class SettingWrite(BaseModel):
    value: Any
    category: str = Field("general", min_length=2, max_length=50)


class SettingRead(BaseModel):
    key: str
    value: Any
    category: str
