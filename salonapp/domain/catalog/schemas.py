"""Catalog schemas - professionals and salon services"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import normalize_phone, parse_specialties, validate_email


def _required_name(v):
    if v is None or not v.strip():
        raise ValueError("Name is required")
    return v.strip()


class ProfessionalCreate(BaseModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    # Accepts a list or "Corte, Coloração"
    specialties: list[str] = Field(default_factory=list)
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("specialties", mode="before")
    @classmethod
    def split_specialties(cls, v):
        return parse_specialties(v)


class ProfessionalUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    specialties: Optional[list[str]] = None
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("specialties", mode="before")
    @classmethod
    def split_specialties(cls, v):
        return parse_specialties(v)


class ProfessionalResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    specialties: list[str] = []
    commission_rate: Optional[float] = None
    created_at: Optional[datetime] = None

    @field_validator("specialties", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    class Config:
        from_attributes = True


class ServiceCreate(BaseModel):
    name: str
    price: Decimal = Field(..., ge=0)
    duration: int = Field(..., gt=0)  # minutes
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v)


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _required_name(v)


class ServiceResponse(BaseModel):
    id: int
    name: str
    price: float
    duration: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
