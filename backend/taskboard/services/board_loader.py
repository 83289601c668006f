"""Read models for the board detail view and the move-target picker."""

from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models import Board, BoardList, Card
from taskboard.services.access_control import accessible_boards_query


@dataclass
class ListWithCards:
    board_list: BoardList
    cards: list[Card] = field(default_factory=list)


@dataclass
class MoveTarget:
    board_id: int
    board_title: str
    list_id: int
    list_title: str


async def load_board_full(
    db: AsyncSession,
    board: Board,
    archived: bool = False,
) -> list[ListWithCards]:
    """Lists by position, each with its cards (archived or not) by position.

    Card labels come along through the ``Card.labels`` selectin load.
    """
    lists_result = await db.execute(
        select(BoardList)
        .where(BoardList.board_id == board.id)
        .order_by(BoardList.position.asc(), BoardList.id.asc())
    )
    lists = [ListWithCards(board_list=board_list) for board_list in lists_result.scalars().all()]
    if not lists:
        return lists

    cards_result = await db.execute(
        select(Card)
        .join(BoardList, BoardList.id == Card.list_id)
        .where(BoardList.board_id == board.id, Card.archived.is_(archived))
        .order_by(Card.list_id, Card.position.asc(), Card.id.asc())
    )
    cards_by_list: dict[int, list[Card]] = defaultdict(list)
    for card in cards_result.scalars().all():
        cards_by_list[card.list_id].append(card)

    for entry in lists:
        entry.cards = cards_by_list.get(entry.board_list.id, [])
    return lists


def rotate_current_first(boards: list[Board], current_board_id: int) -> list[Board]:
    """Move the current board to the front, keeping the others in order."""
    for index, board in enumerate(boards):
        if board.id == current_board_id:
            return [board, *boards[:index], *boards[index + 1:]]
    return boards


async def load_move_targets(
    db: AsyncSession,
    user_id: int,
    current_board_id: int,
) -> list[MoveTarget]:
    """Every list on every board the user can reach, current board first."""
    boards_result = await db.execute(accessible_boards_query(user_id))
    boards = rotate_current_first(list(boards_result.scalars().all()), current_board_id)
    if not boards:
        return []

    lists_result = await db.execute(
        select(BoardList)
        .where(BoardList.board_id.in_([board.id for board in boards]))
        .order_by(BoardList.position.asc(), BoardList.id.asc())
    )
    lists_by_board: dict[int, list[BoardList]] = defaultdict(list)
    for board_list in lists_result.scalars().all():
        lists_by_board[board_list.board_id].append(board_list)

    return [
        MoveTarget(
            board_id=board.id,
            board_title=board.title,
            list_id=board_list.id,
            list_title=board_list.title,
        )
        for board in boards
        for board_list in lists_by_board[board.id]
    ]
