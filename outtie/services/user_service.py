from outtie.errors import NotFound, ValidationError
from outtie.models.user import User
from outtie.repositories.user_repo import UserRepo
from outtie.services.transaction import transaction
from outtie.utils.validation import reject_unknown

PROFILE_FIELDS = ("phone", "instagram_handle", "whatsapp", "profile_photo")


class UserService:
    def __init__(self, session):
        self.session = session
        self.users = UserRepo(session)

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def update_profile(self, user: User, data: dict) -> User:
        if not data:
            raise ValidationError("No fields to update")
        reject_unknown(data, PROFILE_FIELDS)
        bad = [k for k, v in data.items() if v is not None and not isinstance(v, str)]
        if bad:
            raise ValidationError(fields=bad)

        with transaction(self.session, "user"):
            for key, value in data.items():
                # "" clears the field
                setattr(user, key, (value or "").strip() or None)
        return user
