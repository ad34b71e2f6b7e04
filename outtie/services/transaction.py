from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from outtie.errors import ApiError, InternalError


@contextmanager
def transaction(session, label: str):
    """
    One unit of work: commit on success, full rollback on any failure.
    Store failures surface as a retryable InternalError; API errors pass through.
    """
    try:
        yield session
        session.commit()
    except ApiError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.exception(f"[{label}] transaction rolled back: {e}")
        raise InternalError() from e
    except Exception:
        session.rollback()
        raise
