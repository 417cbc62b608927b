from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models.user import User
from core.exceptions import AuthError, ConflictError, StorageError, ValidationError
from core.logging_config import get_logger
from core.security import hash_password, verify_password

logger = get_logger(__name__)

# Compared against when the email is unknown so both login failures cost a bcrypt check
_dummy_hash: str | None = None


def _get_dummy_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("snagtracker-timing-equaliser")
    return _dummy_hash


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def register_user(db: Session, name: str | None, email: str | None, password: str | None) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Email uniqueness is left to the unique constraint so that two concurrent
    registrations for the same address resolve inside the database: one
    insert commits, the other gets ConflictError.
    """
    if not name or not name.strip() or not email or not email.strip() or not password:
        raise ValidationError("All fields are required")
    for field, value in (("name", name), ("email", email)):
        max_length = User.__table__.c[field].type.length
        if len(value) > max_length:
            raise ValidationError(f"{field.capitalize()} must be at most {max_length} characters", field=field)

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.log_auth_event("register", success=False, user_email=email, reason="Email already in use")
        raise ConflictError("Email already in use.")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to store new user")
        raise StorageError(operation="register")
    db.refresh(user)
    logger.log_auth_event("register", success=True, user_email=email)
    return user


def verify_credentials(db: Session, email: str | None, password: str | None) -> User:
    """Return the user for a matching email/password pair, else AuthError.

    Unknown email and wrong password raise the same error.
    """
    user = get_user_by_email(db, email) if email else None
    if user is None:
        verify_password(password or "", _get_dummy_hash())
        logger.log_auth_event("login", success=False, user_email=email, reason="Unknown email")
        raise AuthError()

    if not password or not verify_password(password, user.password_hash):
        logger.log_auth_event("login", success=False, user_email=email, reason="Wrong password")
        raise AuthError()

    logger.log_auth_event("login", success=True, user_email=email)
    return user
