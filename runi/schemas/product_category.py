from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductCategoryIn(BaseModel):
    category_name: str = Field(..., min_length=1, max_length=200)

    @field_validator("category_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("category_name must not be blank.")
        return v


class ProductCategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    category_name: str

    created_at: datetime
    updated_at: datetime
