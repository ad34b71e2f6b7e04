from __future__ import annotations

from flask import current_app
from flask_mail import Message

from outtie.extensions import mail


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[MailService] could not send mail to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def send_email_token(to_email: str, token: str, ttl_minutes: int) -> tuple[bool, str | None]:
        subject = "Outtie: confirm your email"
        body = (
            "Hi,\n\n"
            f"Your confirmation code is: {token}\n"
            f"It expires in {ttl_minutes} minutes.\n\n"
            "If you did not request this, you can ignore this message.\n"
        )
        return MailService.send_email(to_email, subject, body)
