"""Category and looking-for catalog lookups."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.looking_for import LookingForOption
from app.services.errors import NotFoundError


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def get_category_by_slug(db: Session, slug: str) -> Category:
    category = db.query(Category).filter(Category.slug == slug).first()
    if category is None:
        raise NotFoundError("Category not found")
    return category


def list_looking_for_options(db: Session) -> list[LookingForOption]:
    return db.query(LookingForOption).order_by(LookingForOption.id).all()


def get_looking_for_options(db: Session, ids: list[int]) -> list[LookingForOption]:
    """Options for the given ids; unknown ids are dropped."""
    if not ids:
        return []
    return db.query(LookingForOption).filter(LookingForOption.id.in_(ids)).all()
