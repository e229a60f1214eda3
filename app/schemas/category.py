"""Category and looking-for catalog schemas."""

from __future__ import annotations

from pydantic import ConfigDict

from app.schemas.base import CamelModel


class CategoryRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class LookingForRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
