from flask import jsonify

from outtie.errors import InvalidCredential, Unauthenticated
from outtie.extensions import db
from outtie.repositories.user_repo import UserRepo
from outtie.utils.validation import MAX_DB_INT


def register_jwt_callbacks(jwt):
    """
    Token problems are answered with the same JSON shape as every other API error.
    The user row is looked up on each request so verification changes apply immediately.
    """

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        if not 1 <= user_id <= MAX_DB_INT:
            return None
        return UserRepo(db.session).get_by_id(user_id)

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return jsonify(Unauthenticated().to_dict()), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return jsonify(InvalidCredential().to_dict()), 401

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_data):
        return jsonify(InvalidCredential("Token has expired").to_dict()), 401

    @jwt.revoked_token_loader
    def _revoked_token(_jwt_header, _jwt_data):
        return jsonify(InvalidCredential().to_dict()), 401

    @jwt.user_lookup_error_loader
    def _unknown_user(_jwt_header, _jwt_data):
        return jsonify(InvalidCredential("Invalid token").to_dict()), 401
