import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session

from .config import AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET, TRIAL_DAYS
from .database import get_db
from .exceptions import SubscriptionRequired
from .models import User
from .subscription import check_subscription, is_admin

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def verify_access_token(token: str) -> dict:
    """
    Verify a bearer token issued by the auth provider.

    Checks signature, expiry and audience. Raises 401 on any failure.
    """
    try:
        return jose_jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Expired token presented")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get (or register) the salon operator behind the bearer token"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = verify_access_token(credentials.credentials)

    auth_uid = claims.get("sub")
    email = claims.get("email")
    if not auth_uid:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(claims.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.query(User).filter(User.auth_uid == auth_uid).first()
    if user:
        return user

    # First request from this account: register the salon with a trial
    logger.info(f"🆕 Creating new operator profile: {email}")
    user = User(
        auth_uid=auth_uid,
        email=email or f"{auth_uid}@users.invalid",
        display_name=claims.get("name") or "",
        subscription_status="trial",
        trial_ends_at=datetime.utcnow() + timedelta(days=TRIAL_DAYS),
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        if "unique" in str(e).lower() or "duplicate key" in str(e).lower():
            logger.error(f"❌ Email {email} already registered to another account")
            raise HTTPException(
                status_code=409,
                detail="This email is already registered. Please sign in with your existing account.",
            ) from e
        raise

    logger.info(f"✅ New operator created: {user.email} (trial until {user.trial_ends_at:%Y-%m-%d})")
    return user


async def get_current_user_with_subscription(
    user: User = Depends(get_current_user),
) -> User:
    """
    Get current user and verify the subscription lets them use the dashboard.
    Use this dependency for every operator route behind the paywall.
    """
    allowed, reason = check_subscription(user)
    if not allowed:
        logger.warning(f"⚠️ User {user.email} blocked by subscription gate: {reason}")
        raise SubscriptionRequired(reason)
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Only platform admins may manage other operators' subscriptions"""
    if not is_admin(user):
        logger.warning(f"⚠️ Non-admin {user.email} tried to access admin endpoint")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
