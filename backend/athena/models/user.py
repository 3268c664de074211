"""Pydantic models for users."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """An authenticated user and their profile fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    branch: str | None = None
    year: str | None = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class ProfileUpdate(BaseModel):
    """Request model for updating a user's profile."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(default=None, alias="displayName")
    branch: str | None = None
    year: str | int | None = None
