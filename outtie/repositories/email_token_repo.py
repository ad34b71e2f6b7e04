from datetime import datetime

from sqlalchemy import or_

from outtie.models.email_token import EmailToken


class EmailTokenRepo:
    def __init__(self, session):
        self.session = session

    def create(self, token: EmailToken):
        self.session.add(token)
        self.session.flush()
        return token

    def find(self, email: str, token: str):
        return self.session.query(EmailToken).filter_by(email=email, token=token).first()

    def purge_stale(self, now: datetime) -> int:
        return (
            self.session.query(EmailToken)
            .filter(or_(EmailToken.used.is_(True), EmailToken.expires_at <= now))
            .delete(synchronize_session=False)
        )
