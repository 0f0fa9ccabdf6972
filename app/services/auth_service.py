"""
Auth Service

Resolves a bearer token to the caller's owner id.

- Production: Firebase ID tokens, verified with the Firebase Admin SDK
  (the token's uid is the owner id).
- ENV=development: development tokens issued by POST /auth/test-token
  are accepted as well, before Firebase is consulted.
"""

import asyncio
import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions

from app.core.config import Settings
from app.core.security import verify_access_token

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "smartdoc"


class AuthServiceUnavailableError(Exception):
    """No token verifier is configured."""
    pass


class AuthService:
    """
    Service class for bearer token verification.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._firebase_app: Optional[firebase_admin.App] = None
        self._firebase_attempted = False

    # ============================================================
    # Firebase setup
    # ============================================================

    def _build_credentials(self) -> Optional[credentials.Base]:
        """
        Credentials in order of preference: inline JSON key, key file,
        application default (needs FIREBASE_PROJECT_ID).
        """
        if self.settings.FIREBASE_SERVICE_ACCOUNT_KEY:
            return credentials.Certificate(json.loads(self.settings.FIREBASE_SERVICE_ACCOUNT_KEY))
        if self.settings.FIREBASE_SERVICE_ACCOUNT_KEY_PATH:
            return credentials.Certificate(self.settings.FIREBASE_SERVICE_ACCOUNT_KEY_PATH)
        if self.settings.FIREBASE_PROJECT_ID:
            return credentials.ApplicationDefault()
        return None

    def _ensure_firebase(self) -> Optional[firebase_admin.App]:
        """Initialize the Firebase Admin app once."""
        if self._firebase_attempted:
            return self._firebase_app
        self._firebase_attempted = True

        try:
            self._firebase_app = firebase_admin.get_app(FIREBASE_APP_NAME)
            return self._firebase_app
        except ValueError:
            pass

        try:
            cred = self._build_credentials()
            if cred is None:
                logger.warning("Firebase not configured; only development tokens are accepted")
                return None

            options = {}
            if self.settings.FIREBASE_PROJECT_ID:
                options["projectId"] = self.settings.FIREBASE_PROJECT_ID

            self._firebase_app = firebase_admin.initialize_app(
                cred, options, name=FIREBASE_APP_NAME
            )
            logger.info("Firebase Admin SDK initialized")
        except (ValueError, OSError) as e:
            # Bad key JSON, unreadable key file
            logger.error(f"Firebase Admin SDK init failed (token verification disabled): {e}")
            self._firebase_app = None

        return self._firebase_app

    @property
    def is_available(self) -> bool:
        """Whether any token verifier can be used."""
        return self.settings.is_development or self._ensure_firebase() is not None

    # ============================================================
    # Token verification
    # ============================================================

    async def verify_token(self, token: str) -> str:
        """
        Verify a bearer token.

        Returns:
            The owner id

        Raises:
            ValueError: If the token is invalid or expired
            AuthServiceUnavailableError: If no verifier can check it
        """
        if self.settings.is_development:
            owner_id = verify_access_token(token, self.settings)
            if owner_id:
                return owner_id

        app = self._ensure_firebase()
        if app is None:
            if self.settings.is_development:
                # The development verifier exists and rejected the token
                raise ValueError("Invalid token")
            raise AuthServiceUnavailableError("Authentication service not available")

        try:
            # verify_id_token is blocking (may fetch Google's public keys)
            decoded = await asyncio.to_thread(
                firebase_auth.verify_id_token, token, app
            )
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.info(f"Token verification failed: {e}")
            raise ValueError("Invalid token")

        return decoded["uid"]
