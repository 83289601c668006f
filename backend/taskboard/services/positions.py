"""Position sequencing for ordered sibling collections.

Lists within a board, cards within a list and checklist items within a card
all carry a zero-based integer ``position``. Two operations touch it:

- append: a new sibling goes to ``max(position) + 1`` (``0`` for an empty
  scope), recomputed from storage on every call. Concurrent appends may
  produce duplicates; the next reorder repairs them.
- reorder: the caller supplies the full sibling order as a list of ids and
  every sibling is rewritten to its index in one UPDATE.

Deletes and moves leave gaps. Only reorder makes a scope dense again.
"""

from typing import Any, Sequence, TypeVar

from sqlalchemy import ColumnElement, case, func, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

import structlog

from taskboard.exceptions import NotFoundError, ValidationError

logger = structlog.get_logger()

ModelT = TypeVar("ModelT")


async def next_position(
    db: AsyncSession,
    position_column: InstrumentedAttribute,
    scope_column: InstrumentedAttribute,
    scope_id: int,
) -> int:
    """Position for a sibling appended to the end of ``scope_id``."""
    result = await db.execute(
        select(func.max(position_column)).where(scope_column == scope_id)
    )
    max_position = result.scalar()
    return 0 if max_position is None else max_position + 1


def _parse_id(value: Any) -> int | None:
    # bool is an int subclass; true/false are not identifiers
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdigit():
            return int(stripped)
    return None


def parse_ordered_ids(raw: Any, field_name: str) -> list[int]:
    """Validate a caller-declared ordering before any lookup happens.

    Raises:
        ValidationError: empty or non-list input, a non-numeric element, or
            a duplicated id.
    """
    if not isinstance(raw, list) or len(raw) < 1:
        raise ValidationError(f"{field_name} must be a non-empty array")

    ids = [_parse_id(value) for value in raw]
    if any(parsed is None for parsed in ids):
        raise ValidationError(f"{field_name} must contain only numbers")

    if len(set(ids)) != len(ids):
        raise ValidationError(f"{field_name} must be unique")

    return ids


async def reorder_siblings(
    db: AsyncSession,
    model: type[ModelT],
    scope_column: InstrumentedAttribute,
    scope_id: int,
    ordered_ids: Sequence[int],
    entity_name: str,
    visible: ColumnElement[bool] | None = None,
) -> list[ModelT]:
    """Rewrite every sibling's position to its index in ``ordered_ids``.

    The supplied ids must be exactly the ids currently in scope; anything
    else (foreign, missing or extra ids) is reported as not found and nothing
    is written. When ``visible`` is given, only matching siblings are part of
    the caller's ordering and the rest are placed after them in their
    current relative order, so the whole scope ends up dense. All positions
    change in a single statement and commit together.

    Returns the visible siblings in their new order.
    """
    in_scope = scope_column == scope_id
    visible_clause = in_scope if visible is None else in_scope & visible

    result = await db.execute(select(model.id).where(visible_clause))
    current_ids = set(result.scalars().all())

    if set(ordered_ids) != current_ids:
        logger.info(
            "reorder_rejected",
            entity=entity_name,
            scope_id=scope_id,
            supplied=len(ordered_ids),
            current=len(current_ids),
        )
        raise NotFoundError(f"{entity_name} not found")

    full_order = list(ordered_ids)
    if visible is not None:
        trailing = await db.execute(
            select(model.id)
            .where(in_scope, not_(visible))
            .order_by(model.position.asc(), model.id.asc())
        )
        full_order.extend(trailing.scalars().all())

    try:
        await db.execute(
            update(model)
            .where(in_scope, model.id.in_(full_order))
            .values(
                position=case(
                    {item_id: index for index, item_id in enumerate(full_order)},
                    value=model.id,
                )
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    result = await db.execute(
        select(model)
        .where(visible_clause)
        .order_by(model.position.asc(), model.id.asc())
        .execution_options(populate_existing=True)
    )
    siblings = list(result.scalars().all())

    logger.info(
        "siblings_reordered",
        entity=entity_name,
        scope_id=scope_id,
        count=len(full_order),
    )
    return siblings
