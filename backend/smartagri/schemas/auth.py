"""Pydantic schemas for accounts and bearer tokens."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """New account details."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    farm_location: str | None = None
    crop_types: list[str] = Field(default_factory=list)
    soil_type: str | None = None
    phone_number: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=100)
    farm_location: str | None = None
    crop_types: list[str] | None = None
    soil_type: str | None = None
    phone_number: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    farm_location: str | None = None
    crop_types: list[str] = Field(default_factory=list)
    soil_type: str | None = None
    phone_number: str | None = None
    created_at: datetime


class AuthResponse(BaseModel):
    """Returned by register and login."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserOut
    access_token: str = Field(alias="accessToken")
    token_type: str = Field("bearer", alias="tokenType")
