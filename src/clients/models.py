"""
Request and response models for the projects API.

Wire payloads use camelCase; models accept either spelling.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateProjectInput(_APIModel):
    """Request to create a project in a space."""

    space_name: str = Field(..., alias="spaceName")
    display_name: str = Field(..., alias="displayName")
    description: str = Field("", description="Never omitted; empty when unset")

    @field_validator("space_name", "display_name")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


class CreateProjectOutput(_APIModel):
    name: Optional[str] = None
    space_name: Optional[str] = Field(None, alias="spaceName")
    display_name: Optional[str] = Field(None, alias="displayName")
    description: Optional[str] = None


class GetProjectInput(_APIModel):
    name: str
    space_name: str = Field(..., alias="spaceName")


class GetProjectOutput(_APIModel):
    name: Optional[str] = None
    space_name: Optional[str] = Field(None, alias="spaceName")
    display_name: Optional[str] = Field(None, alias="displayName")
    description: Optional[str] = None


class UpdateProjectInput(_APIModel):
    """Full-object update; the service does not accept partial patches."""

    name: str
    space_name: str = Field(..., alias="spaceName")
    display_name: str = Field(..., alias="displayName")
    description: str = ""


class UpdateProjectOutput(_APIModel):
    name: Optional[str] = None
    space_name: Optional[str] = Field(None, alias="spaceName")
    display_name: Optional[str] = Field(None, alias="displayName")
    description: Optional[str] = None


class DeleteProjectInput(_APIModel):
    name: str
    space_name: str = Field(..., alias="spaceName")


class DeleteProjectOutput(_APIModel):
    name: Optional[str] = None
    space_name: Optional[str] = Field(None, alias="spaceName")
    display_name: Optional[str] = Field(None, alias="displayName")
