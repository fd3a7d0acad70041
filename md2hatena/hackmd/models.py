"""Pydantic models for HackMD API responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _HackMDModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TeamInfo(_HackMDModel):
    id: str
    owner_id: str
    path: str
    name: str
    logo: str = ""
    description: str = ""
    visibility: str = ""
    created_at: int | None = None


class UserInfo(_HackMDModel):
    """Response of ``GET /v1/me``."""

    id: str
    name: str
    email: str | None = None
    user_path: str
    photo: str = ""
    teams: list[TeamInfo] = Field(default_factory=list)
