# backend/app/schemas/binding.py
"""
Schemas for account bindings.

The raw secret only appears in request bodies. No response schema has a
secret field, encrypted or not.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.schemas.platform import PlatformResponse


class BindingCreate(BaseModel):
    platform_id: str = Field(..., min_length=1)
    account_name: str = Field(..., min_length=1, max_length=255)
    # Base32 TOTP secret as shown by the platform ("JBSWY3DPEHPK3PXP")
    secret: str = Field(..., min_length=1, max_length=512)


class BindingUpdate(BaseModel):
    account_name: Optional[str] = Field(None, min_length=1, max_length=255)
    # Set to rotate the secret
    secret: Optional[str] = Field(None, min_length=1, max_length=512)


class BindingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    platform_id: str
    account_name: str
    platform: Optional[PlatformResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BindingPage(BaseModel):
    data: List[BindingResponse]
    total: int


class OTPResponse(BaseModel):
    code: str
    expires_in_seconds: int


class OTPVerifyRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=16)


class OTPVerifyResponse(BaseModel):
    valid: bool
