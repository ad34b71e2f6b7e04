import secrets
from datetime import datetime, timedelta

from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from outtie.errors import Conflict, InvalidCredential, NotFound, ValidationError
from outtie.models.email_token import EmailToken
from outtie.models.user import User
from outtie.repositories.email_token_repo import EmailTokenRepo
from outtie.repositories.user_repo import UserRepo
from outtie.services.mail_service import MailService
from outtie.services.transaction import transaction
from outtie.utils.validation import as_int, is_blank, reject_unknown

MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, session):
        self.session = session
        self.users = UserRepo(session)
        self.tokens = EmailTokenRepo(session)

    @staticmethod
    def _token_for(user: User) -> str:
        return create_access_token(identity=str(user.id))

    def register(self, data: dict):
        reject_unknown(data, ("email", "password", "name", "graduation_year"))
        missing = [f for f in ("email", "password", "name") if is_blank(data.get(f))]
        if missing:
            raise ValidationError("Email, password, and name are required", fields=missing)

        email = str(data["email"]).strip().lower()
        domain = current_app.config["INSTITUTION_EMAIL_DOMAIN"]
        if not email.endswith("@" + domain) or email.count("@") != 1 or email.startswith("@"):
            raise ValidationError(f"Must use @{domain} email address", fields=["email"])

        password = str(data["password"])
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", fields=["password"]
            )

        errors = []
        graduation_year = as_int(data.get("graduation_year"), "graduation_year", errors, required=False)
        if errors:
            raise ValidationError(fields=errors)

        with transaction(self.session, "auth"):
            if self.users.get_by_email(email):
                raise Conflict("User already exists")
            user = User(
                email=email,
                password_hash=generate_password_hash(password),
                name=str(data["name"]).strip(),
                graduation_year=graduation_year,
                verification_status="pending",
            )
            try:
                self.users.create(user)
            except IntegrityError as e:
                raise Conflict("User already exists") from e

        current_app.logger.info(f"[auth] registered user={user.id}")
        return self._token_for(user), user

    def login(self, data: dict):
        missing = [f for f in ("email", "password") if is_blank(data.get(f))]
        if missing:
            raise ValidationError("Email and password are required", fields=missing)

        user = self.users.get_by_email(str(data["email"]).strip())
        if not user or not check_password_hash(user.password_hash, str(data["password"])):
            raise InvalidCredential("Invalid email or password")

        return self._token_for(user), user

    def request_verification(self, user: User, data: dict) -> User:
        """Queues the account for review; approval itself happens outside this service."""
        reject_unknown(data, ("student_id_document",))
        document = data.get("student_id_document")
        if document is not None and (not isinstance(document, str) or not document.strip()):
            raise ValidationError(fields=["student_id_document"])

        with transaction(self.session, "auth"):
            # an approved account is not sent back for review
            if user.verification_status != "approved":
                user.verification_status = "pending"
            if document:
                user.student_id_document = document.strip()

        current_app.logger.info(f"[auth] verification requested user={user.id}")
        return user

    def issue_email_token(self, user: User):
        ttl = current_app.config.get("EMAIL_TOKEN_TTL_MINUTES", 30)
        with transaction(self.session, "auth"):
            row = EmailToken(
                email=user.email,
                token=secrets.token_urlsafe(32),
                expires_at=datetime.utcnow() + timedelta(minutes=ttl),
                used=False,
            )
            self.tokens.create(row)

        sent, _err = MailService.send_email_token(user.email, row.token, ttl)
        return row, sent

    def confirm_email_token(self, user: User, token) -> None:
        if is_blank(token) or not isinstance(token, str):
            raise ValidationError(fields=["token"])

        with transaction(self.session, "auth"):
            row = self.tokens.find(user.email, token.strip())
            if not row or not row.is_valid(datetime.utcnow()):
                raise NotFound("Token not found or expired")
            row.used = True
