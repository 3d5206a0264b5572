"""Catalog records consumed by the verifier.

Field aliases accept the column names used by the product store
(``BrandName``, ``gpc``, ``unit``, ``productnameenglish``,
``productnamearabic``) so raw rows validate without a mapping step.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


class ProductRecord(BaseModel):
    id: Optional[Union[int, str]] = None
    name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("name", "productnameenglish"),
    )
    localized_names: dict[str, str] = {}
    brand_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("brand_name", "BrandName"),
    )
    classification_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("classification_code", "gpc"),
        description="'<numeric-code>-<label>' or a bare label",
        examples=["20002871-Type of Engine Oil Target"],
    )
    unit_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("unit_code", "unit"),
    )
    front_image: Optional[str] = None
    barcode: Optional[str] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def collect_localized_names(cls, data):
        """Fold the store's ``productnamearabic`` column into ``localized_names``."""
        if isinstance(data, dict) and "productnamearabic" in data:
            data = dict(data)
            arabic = data.pop("productnamearabic")
            names = dict(data.get("localized_names") or {})
            names.setdefault("ar", arabic)
            data["localized_names"] = names
        return data

    @field_validator(
        "name", "brand_name", "classification_code", "unit_code", "front_image", "barcode",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Empty and whitespace-only strings count as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("localized_names", mode="before")
    @classmethod
    def drop_empty_names(cls, v):
        if not v:
            return {}
        return {k: str(name) for k, name in v.items() if name and str(name).strip()}


def _code_as_str(v):
    """Reference tables key codes as strings; numeric codes from JSON are accepted."""
    if isinstance(v, (int, str)) and not isinstance(v, bool):
        return str(v).strip()
    return v


class BrandRef(BaseModel):
    name: str
    category: Optional[str] = None

    model_config = {"from_attributes": True}


class UnitRef(BaseModel):
    code: str
    name: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("code", mode="before")
    @classmethod
    def code_as_str(cls, v):
        return _code_as_str(v)


class ClassificationRef(BaseModel):
    code: str
    title: Optional[str] = None
    definition: Optional[str] = None
    category: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("code", mode="before")
    @classmethod
    def code_as_str(cls, v):
        return _code_as_str(v)
