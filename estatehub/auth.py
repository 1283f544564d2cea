"""
Authentication - bearer JWT credentials resolved per request through Flask-Login
"""

import datetime

import jwt
import structlog
from flask import Blueprint, current_app, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager, current_user, login_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from .api_responses import success_response, unauthorized_response
from .exceptions import AuthenticationException, ConflictException, DatabaseException, ValidationException
from .repositories.user_repository import UserRepository
from .utils import now_utc, sanitize_sensitive_data

logger = structlog.get_logger('auth')

login_manager = LoginManager()
login_manager.session_protection = None

limiter = Limiter(key_func=get_remote_address, default_limits=[])

auth_blueprint = Blueprint("auth", __name__, url_prefix="/api/auth")

MIN_PASSWORD_LENGTH = 6


def issue_token(user):
    """Sign a JWT identifying `user`"""
    expires = now_utc() + datetime.timedelta(minutes=current_app.config["JWT_EXPIRES_MINUTES"])
    payload = {"sub": str(user.id), "iat": now_utc(), "exp": expires}
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=current_app.config["JWT_ALGORITHM"])


def decode_token(token):
    """Return the token payload, or None when the signature, expiry or format is invalid"""
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected invalid token: {e}")
    return None


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve `Authorization: Bearer <token>` to a User; None means unauthenticated"""
    header = req.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None

    payload = decode_token(token.strip())
    if payload is None:
        return None

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    return UserRepository.get_by_id(user_id)


@login_manager.unauthorized_handler
def unauthorized_json():
    return unauthorized_response()


def _require_fields(data, *fields):
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    missing = [f for f in fields if not isinstance(data.get(f), str) or not data.get(f).strip()]
    if missing:
        logger.debug(f"Rejected auth payload: {sanitize_sensitive_data(data)}")
        raise ValidationException(f"Missing required fields: {', '.join(missing)}")


def _login_rate_limit():
    return current_app.config.get("LOGIN_RATE_LIMIT", "20 per minute")


@auth_blueprint.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True)
    _require_fields(data, "name", "email", "password")

    email = data["email"].strip().lower()
    if "@" not in email:
        raise ValidationException("Invalid email address")
    if len(data["password"]) < MIN_PASSWORD_LENGTH:
        raise ValidationException(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if UserRepository.get_by_email(email):
        raise ConflictException("User already exists")

    try:
        user = UserRepository.create(
            name=data["name"].strip(),
            email=email,
            password=generate_password_hash(data["password"], method="pbkdf2:sha256"),
        )
    except IntegrityError:
        raise ConflictException("User already exists")
    except SQLAlchemyError as e:
        logger.error(f"Error creating user {email}: {e}")
        raise DatabaseException("Failed to register user")

    logger.info(f"Registered user {user.id}")
    return success_response({"token": issue_token(user), "user": user.to_public_dict()}, status_code=201)


@auth_blueprint.route("/login", methods=["POST"])
@limiter.limit(_login_rate_limit)
def login():
    data = request.get_json(silent=True)
    _require_fields(data, "email", "password")

    user = UserRepository.get_by_email(data["email"])
    if not user or not check_password_hash(user.password, data["password"]):
        logger.warning("Incorrect login attempt")
        raise AuthenticationException("Invalid credentials")

    logger.info(f"Successful login for user {user.id}")
    return success_response({"token": issue_token(user), "user": user.to_public_dict()})


@auth_blueprint.route("/me")
@login_required
def me():
    return success_response(current_user.to_public_dict())
