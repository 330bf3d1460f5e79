"""Read-only lookups against the scholar directory."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import ROLE_SCHOLAR, User


def _verified_scholars():
    return select(User).where(User.role == ROLE_SCHOLAR, User.verified.is_(True))


def find_verified_scholars(session: Session) -> Sequence[User]:
    """Return every verified scholar ordered by full name, then id."""

    stmt = _verified_scholars().order_by(User.full_name.asc(), User.user_id.asc())
    return session.execute(stmt).scalars().all()


def find_verified_scholar_by_id(session: Session, scholar_id: UUID) -> Optional[User]:
    stmt = _verified_scholars().where(User.user_id == scholar_id)
    return session.execute(stmt).scalar_one_or_none()


def resolve_names(session: Session, user_ids: Iterable[UUID]) -> dict[UUID, str]:
    """Map user ids to display names; unknown ids are simply absent."""

    ids = {user_id for user_id in user_ids if user_id is not None}
    if not ids:
        return {}
    stmt = select(User.user_id, User.full_name).where(User.user_id.in_(ids))
    return {user_id: full_name for user_id, full_name in session.execute(stmt).all()}


def resolve_name(session: Session, user_id: Optional[UUID]) -> Optional[str]:
    if user_id is None:
        return None
    return resolve_names(session, [user_id]).get(user_id)
