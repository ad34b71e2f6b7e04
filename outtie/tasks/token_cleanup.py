# outtie/tasks/token_cleanup.py
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from outtie.extensions import db
from outtie.repositories.email_token_repo import EmailTokenRepo


def run_token_cleanup_job(app) -> int:
    """
    Deletes email tokens that are used or past expires_at.
    Returns the number of rows removed (0 on failure).
    """
    with app.app_context():
        try:
            removed = EmailTokenRepo(db.session).purge_stale(datetime.utcnow())
            db.session.commit()
            current_app.logger.info(f"[token_cleanup] removed={removed}")
            return removed
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[token_cleanup] failed: {e}")
            return 0
