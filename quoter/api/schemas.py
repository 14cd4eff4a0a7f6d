"""Pydantic schemas for API request/response models."""

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ---- Request schemas ----

class LeadContact(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str
    email: str

    @field_validator("name")
    @classmethod
    def _name_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter your name")
        return v.strip()

    @field_validator("email")
    @classmethod
    def _email_valid(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_RE.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("phone")
    @classmethod
    def _phone_valid(cls, v: str) -> str:
        digits = re.sub(r"\D", "", v)
        if not 10 <= len(digits) <= 15:
            raise ValueError("Please enter a valid phone number (10-15 digits)")
        return v.strip()


class LeadRequest(BaseModel):
    inputs: dict[str, Any] = Field(default_factory=dict, description="Flat calculator input record")
    contact: LeadContact


# ---- Response schemas ----

class VariantResponse(BaseModel):
    variant: str
    strategy: str
    tiers: list[str]
    product_types: list[str]
    fee_columns: list[str]
    property_types: list[str] = []


class QuoteResponse(BaseModel):
    status: str  # "quoted" / "rejected"
    quote: dict[str, Any] | None = None
    rejection: dict[str, Any] | None = None


class MatrixResponse(BaseModel):
    status: str
    matrix: dict[str, Any] | None = None
    rejection: dict[str, Any] | None = None


class LeadResponse(BaseModel):
    request_id: str
    delivery: str  # "scheduled" / "not_configured"
    quote: dict[str, Any]
