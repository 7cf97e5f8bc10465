from typing import Any, Sequence, Type
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from core.exceptions import InvalidPaginationError


def validate_page_window(page_index: int, page_size: int) -> None:
    if page_index < 0 or page_size < 1:
        raise InvalidPaginationError(
            f"Invalid pagination parameters: page index must be >= 0 and page size >= 1, got page index {page_index} and page size {page_size}"
        )


def count_rows(db: Session, model: Type[Any], *criteria) -> int:
    """Count non-deleted rows of ``model`` matching extra ``criteria``."""
    stmt = select(func.count()).select_from(model).where(model.deleted.is_(False))
    if criteria:
        stmt = stmt.where(*criteria)
    return db.scalar(stmt) or 0


def paginate(
    db: Session, model: Type[Any], page_index: int, page_size: int
) -> dict:
    """Return one page of non-deleted rows, most recent first.

    Args:
        page_index: zero based page index
        page_size: rows per page

    Returns:
        dict with ``items`` for the requested window and ``total_count``
        over the whole non-deleted set

    Raises:
        InvalidPaginationError: page_index < 0 or page_size < 1
    """
    validate_page_window(page_index, page_size)

    stmt = (
        select(model)
        .where(model.deleted.is_(False))
        .order_by(model.created_at.desc(), model.id.desc())
        .offset(page_index * page_size)
        .limit(page_size)
    )
    items: Sequence[Any] = db.scalars(stmt).all()
    total_count = count_rows(db, model)
    return {"items": list(items), "total_count": total_count}


def page_count(total_count: int, page_size: int) -> int:
    return (total_count + page_size - 1) // page_size if total_count else 0


def percentage(part: int, total: int) -> float:
    return (part / total) * 100 if total > 0 else 0
