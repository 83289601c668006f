"""Shared API response schemas.

JSON keys are camelCase on the wire; attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from taskboard.models import BoardList, Card


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, populated from ORM attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserResponse(CamelModel):
    id: int
    email: str
    name: str | None
    created_at: datetime


class BoardResponse(CamelModel):
    id: int
    title: str
    owner_id: int
    created_at: datetime


class ListResponse(CamelModel):
    id: int
    title: str
    board_id: int
    position: int
    created_at: datetime


class LabelResponse(CamelModel):
    id: int
    board_id: int
    name: str
    color: str | None


class CardResponse(CamelModel):
    id: int
    title: str
    description: str | None
    due_date: datetime | None
    position: int
    list_id: int
    archived: bool
    archived_at: datetime | None
    created_at: datetime
    labels: list[LabelResponse] = []


class ListWithCardsResponse(ListResponse):
    cards: list[CardResponse] = []


class BoardFullResponse(CamelModel):
    board: BoardResponse
    lists: list[ListWithCardsResponse]


def list_with_cards(board_list: BoardList, cards: list[Card]) -> ListWithCardsResponse:
    return ListWithCardsResponse.model_validate(board_list).model_copy(
        update={"cards": [CardResponse.model_validate(card) for card in cards]}
    )
