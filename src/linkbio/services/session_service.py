from sqlalchemy.orm import Session
from datetime import datetime, UTC
from typing import List

from src.linkbio.core.config import get_redis, logger
from src.linkbio.models.user_session import UserSession


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def create_session(
    db: Session, user_id: int, token: str, expires_at: datetime
) -> UserSession:
    """
    Record an issued token.

    The row is mirrored to Redis as ``session:<token>`` with a TTL equal to
    the token's remaining lifetime, and the token is added to the
    ``user_sessions:<user_id>`` set.

    Args:
        db: Database session
        user_id: Owner of the token
        token: Encoded token
        expires_at: Expiry instant of the token

    Returns:
        Created session row
    """
    db_session = UserSession(user_id=user_id, token=token, expires_at=expires_at)
    db.add(db_session)
    db.commit()
    db.refresh(db_session)

    try:
        redis = get_redis()
        ttl = max(1, int(_as_utc(expires_at).timestamp() - datetime.now(UTC).timestamp()))
        redis.setex(f"session:{token}", ttl, str(user_id))
        redis.sadd(f"user_sessions:{user_id}", token)
        logger.info(f"Session cached for user {user_id} with TTL of {ttl} seconds")
    except Exception as e:
        logger.error(f"Redis error when caching session: {e}")

    return db_session


def delete_session(db: Session, token: str) -> bool:
    """
    Delete the session row for a token.

    Args:
        db: Database session
        token: Encoded token

    Returns:
        True if a row was deleted, False if none matched
    """
    db_session = db.query(UserSession).filter(UserSession.token == token).first()
    if not db_session:
        return False

    user_id = db_session.user_id
    db.delete(db_session)
    db.commit()

    try:
        redis = get_redis()
        redis.delete(f"session:{token}")
        redis.srem(f"user_sessions:{user_id}", token)
    except Exception as e:
        logger.error(f"Redis error when removing session: {e}")

    return True


def get_sessions_for_user(db: Session, user_id: int) -> List[UserSession]:
    return (
        db.query(UserSession)
        .filter(UserSession.user_id == user_id)
        .order_by(UserSession.created_at.asc())
        .all()
    )


def cleanup_expired_sessions(db: Session) -> int:
    """
    Delete session rows whose expiry has passed.

    Token validity is unaffected; this only keeps the table small.

    Args:
        db: Database session

    Returns:
        Number of rows deleted
    """
    expired = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= datetime.now(UTC))
        .all()
    )

    for db_session in expired:
        db.delete(db_session)
    db.commit()

    try:
        redis = get_redis()
        for db_session in expired:
            redis.srem(f"user_sessions:{db_session.user_id}", db_session.token)
    except Exception as e:
        logger.error(f"Redis error: {e}")

    return len(expired)


def forget_user_sessions(user_id: int, tokens: List[str]) -> None:
    """
    Drop the Redis copies of a user's sessions.

    Called after the user's rows are gone, e.g. on account deletion.
    """
    try:
        redis = get_redis()
        for token in tokens:
            redis.delete(f"session:{token}")
        redis.delete(f"user_sessions:{user_id}")
    except Exception as e:
        logger.error(f"Redis error when removing sessions of user {user_id}: {e}")
