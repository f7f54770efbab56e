from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.enums import DietaryPreference


class SignUpRequest(BaseModel):
    """Register an account with the identity provider"""

    email: str = Field(..., min_length=3, max_length=320)
    full_name: Optional[str] = Field(None, max_length=200)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("email must look like name@domain")
        return v


class SignInRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class SessionResponse(BaseModel):
    """Identity session issued on sign-in"""

    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    expires_at: datetime


class ProfileResponse(BaseModel):
    id: UUID
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    dietary_preferences: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("dietary_preferences", mode="before")
    @classmethod
    def default_preferences(cls, v):
        return v or []


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left untouched"""

    username: Optional[str] = Field(None, min_length=1, max_length=50)
    full_name: Optional[str] = Field(None, max_length=200)
    avatar_url: Optional[str] = None
    dietary_preferences: Optional[List[DietaryPreference]] = None

    @field_validator("dietary_preferences")
    @classmethod
    def dedupe_preferences(cls, v):
        if v is None:
            return v
        seen = []
        for pref in v:
            if pref not in seen:
                seen.append(pref)
        return seen


class MeResponse(BaseModel):
    """Current session identity and its profile"""

    user_id: UUID
    expires_at: Optional[datetime] = None
    profile: ProfileResponse
