import pytest
from sqlalchemy import select

from taskboard.exceptions import NotFoundError, ValidationError
from taskboard.models import Board, BoardList, Card, User
from taskboard.services.positions import next_position, parse_ordered_ids, reorder_siblings


async def _board_with_lists(db, *titles: str) -> tuple[Board, list[BoardList]]:
    user = User(email="owner@example.com", password_hash="x")
    db.add(user)
    await db.flush()
    board = Board(title="Sprint", owner_id=user.id)
    db.add(board)
    await db.flush()

    lists = []
    for title in titles:
        position = await next_position(db, BoardList.position, BoardList.board_id, board.id)
        board_list = BoardList(title=title, board_id=board.id, position=position)
        db.add(board_list)
        await db.flush()
        lists.append(board_list)
    await db.commit()
    return board, lists


async def _positions(db, board_id: int) -> dict[str, int]:
    result = await db.execute(
        select(BoardList.title, BoardList.position).where(BoardList.board_id == board_id)
    )
    return dict(result.all())


def test_parse_ordered_ids_accepts_numeric_strings_and_integral_floats():
    assert parse_ordered_ids([3, "1", 2.0], "orderedListIds") == [3, 1, 2]


@pytest.mark.parametrize(
    "raw, message",
    [
        (None, "orderedListIds must be a non-empty array"),
        ([], "orderedListIds must be a non-empty array"),
        ({"a": 1}, "orderedListIds must be a non-empty array"),
        ([1, "x"], "orderedListIds must contain only numbers"),
        ([1, True], "orderedListIds must contain only numbers"),
        ([1, 1.5], "orderedListIds must contain only numbers"),
        ([1, 2, 1], "orderedListIds must be unique"),
    ],
)
def test_parse_ordered_ids_rejects_bad_input(raw, message):
    with pytest.raises(ValidationError) as exc_info:
        parse_ordered_ids(raw, "orderedListIds")
    assert exc_info.value.message == message


async def test_next_position_starts_at_zero_and_follows_max(db):
    board, lists = await _board_with_lists(db, "Todo", "Doing", "Done")
    assert [board_list.position for board_list in lists] == [0, 1, 2]

    # Gaps are not filled: append goes after the highest position
    lists[1].position = 7
    await db.commit()
    assert await next_position(db, BoardList.position, BoardList.board_id, board.id) == 8

    empty = await next_position(db, Card.position, Card.list_id, lists[0].id)
    assert empty == 0


async def test_reorder_rewrites_every_position(db):
    board, (todo, doing, done) = await _board_with_lists(db, "Todo", "Doing", "Done")

    reordered = await reorder_siblings(
        db, BoardList, BoardList.board_id, board.id, [done.id, todo.id, doing.id], "List"
    )

    assert [board_list.title for board_list in reordered] == ["Done", "Todo", "Doing"]
    assert [board_list.position for board_list in reordered] == [0, 1, 2]


async def test_reorder_with_wrong_id_set_changes_nothing(db):
    board, (todo, doing, done) = await _board_with_lists(db, "Todo", "Doing", "Done")
    before = await _positions(db, board.id)

    for ordered in ([todo.id, doing.id], [todo.id, doing.id, done.id, 999]):
        with pytest.raises(NotFoundError) as exc_info:
            await reorder_siblings(db, BoardList, BoardList.board_id, board.id, ordered, "List")
        assert exc_info.value.message == "List not found"

    assert await _positions(db, board.id) == before


async def test_reorder_places_hidden_siblings_last(db):
    board, (todo,) = await _board_with_lists(db, "Todo")
    cards = []
    for index, title in enumerate(["A", "B", "C"]):
        card = Card(title=title, list_id=todo.id, position=index)
        db.add(card)
        cards.append(card)
    cards[1].archived = True
    await db.commit()
    a, b, c = cards

    visible = await reorder_siblings(
        db,
        Card,
        Card.list_id,
        todo.id,
        [c.id, a.id],
        "Card",
        visible=Card.archived.is_(False),
    )

    assert [(card.title, card.position) for card in visible] == [("C", 0), ("A", 1)]
    archived = await db.execute(select(Card.position).where(Card.id == b.id))
    assert archived.scalar_one() == 2
