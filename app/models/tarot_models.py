# app/models/tarot_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

CARDS_PER_SPREAD = 3


class CardDraw(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    is_reversed: bool = Field(default=False, alias="isReversed")


class ReadingRequest(BaseModel):
    concern: str
    cards: List[CardDraw] = Field(min_length=CARDS_PER_SPREAD, max_length=CARDS_PER_SPREAD)
    language: Optional[str] = None


class Reading(BaseModel):
    intro: str
    readings: List[str] = Field(min_length=CARDS_PER_SPREAD, max_length=CARDS_PER_SPREAD)
    conclusion: str
