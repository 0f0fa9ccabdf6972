"""
Development Tokens

Signed JWTs (python-jose) issued by POST /auth/test-token so the API can
be exercised without an identity provider. The subject is the owner id.
They are only honoured while ENV=development.

Each function signs or checks with the given Settings (the ones the app
was built with); the process-wide settings are used when none is passed.
"""

from datetime import datetime, timezone, timedelta
from typing import Any, Dict, Optional, Union
import uuid

from jose import JWTError, jwt

from app.core.config import Settings
from app.core.config import settings as default_settings

TOKEN_TYPE_ACCESS = "access"
TEST_TOKEN_ISSUER = "smartdoc-dev"


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Sign a development token for subject.

    Expires after TEST_TOKEN_EXPIRE_HOURS unless expires_delta is given.
    """
    settings = settings or default_settings
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.TEST_TOKEN_EXPIRE_HOURS))

    claims = {
        "sub": str(subject),
        "type": TOKEN_TYPE_ACCESS,
        "iss": TEST_TOKEN_ISSUER,
        "iat": now,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode(
    token: str,
    settings: Optional[Settings],
    verify_exp: bool = True,
) -> Optional[Dict[str, Any]]:
    settings = settings or default_settings
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=TEST_TOKEN_ISSUER,
            options={"verify_exp": verify_exp},
        )
    except JWTError:
        # Bad signature, wrong issuer, expired or not a JWT at all
        return None


def verify_access_token(token: str, settings: Optional[Settings] = None) -> Optional[str]:
    """
    Owner id of a valid, unexpired development token; None otherwise.
    """
    payload = _decode(token, settings)
    if not payload or payload.get("type") != TOKEN_TYPE_ACCESS:
        return None
    return payload.get("sub")


def get_token_remaining_time(token: str, settings: Optional[Settings] = None) -> Optional[int]:
    """Seconds until the token expires (0 once expired)."""
    payload = _decode(token, settings, verify_exp=False)
    if not payload or "exp" not in payload:
        return None

    remaining = payload["exp"] - datetime.now(timezone.utc).timestamp()
    return max(0, int(remaining))
