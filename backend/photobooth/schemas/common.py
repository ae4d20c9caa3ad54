"""Shared schema pieces — field patterns, email normalisation and the ORM-reading base model."""

from pydantic import BaseModel, ConfigDict

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


def normalize_email(value):
    """Before-validator for EmailStr fields: stripped, lowercased, blank → None."""
    if isinstance(value, str):
        return value.strip().lower() or None
    return value


class ORMModel(BaseModel):
    """Response base: reads attributes straight off ORM rows."""
    model_config = ConfigDict(from_attributes=True)


class WriteModel(BaseModel):
    """Request base for payloads written straight onto ORM rows: enums dumped as values."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)
