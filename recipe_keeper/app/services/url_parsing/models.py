"""Pydantic models for URL recipe parsing."""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_record_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecipeRecord(BaseModel):
    """A recipe recovered from a web page, ready to hand to storage."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=_new_record_id)
    url: str
    title: str
    description: str = ""
    image: str
    ingredients: List[str]
    directions: List[str]
    categories: List[str]
    cook_time: str = Field("", alias="cookTime")
    prep_time: str = Field("", alias="prepTime")
    total_time: str = Field("", alias="totalTime")
    recipe_yield: str = Field("", alias="yield")
    date_added: datetime = Field(default_factory=_utcnow, alias="dateAdded")


class ParseResult(BaseModel):
    """Result of a recipe parsing attempt."""

    success: bool
    recipe: Optional[RecipeRecord] = None
    parser_strategy: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
