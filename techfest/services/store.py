"""Transaction helpers wrapping the SQLAlchemy session."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Type, TypeVar

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from techfest.errors import BackendError, ConflictError, NotFound, TechFestError
from techfest.extensions import db

Model = TypeVar("Model", bound=db.Model)


@contextmanager
def transaction(action: str, conflict_message: str | None = None) -> Iterator:
    """Run a unit of work and commit it, rolling back on any failure.

    Integrity violations become ``ConflictError`` when ``conflict_message``
    is given; other store failures become ``BackendError``.
    """
    try:
        yield db.session
        db.session.commit()
    except TechFestError:
        db.session.rollback()
        raise
    except IntegrityError as e:
        db.session.rollback()
        if conflict_message:
            raise ConflictError(conflict_message) from e
        current_app.logger.error(f"Integrity error while trying to {action}: {e}")
        raise BackendError(f"Failed to {action}") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to {action}: {e}")
        raise BackendError(f"Failed to {action}") from e


def get_or_404(model: Type[Model], object_id: str, label: str | None = None) -> Model:
    instance = db.session.get(model, object_id)
    if instance is None:
        raise NotFound(f"{label or model.__name__} not found")
    return instance


__all__ = ['transaction', 'get_or_404']
