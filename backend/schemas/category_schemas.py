from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from backend.schemas.base import CamelModel
from backend.utils.validators import is_valid_hex_color


class CategoryRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: str = "#000000"

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        if not value.strip():
            raise ValueError("Category name is required.")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value):
        if not is_valid_hex_color(value):
            raise ValueError("Enter a valid hex color code (e.g. #FF0000).")
        return value


class CreateCategoryRequest(CategoryRequest):
    pass


class UpdateCategoryRequest(CategoryRequest):
    pass


class CategoryOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    color: str
    is_default: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
