"""
Firebase identity provider.
Resolves the bearer token of a request into a Firebase UID and profile data.
"""

from typing import Optional

import firebase_admin
from fastapi import Header
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError

from core.config import settings
from utils.logger import logger


def get_firebase_app():
    """Return the default Firebase app, initialising it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        if settings.FIREBASE_CREDENTIALS_PATH:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
        else:
            cred = credentials.ApplicationDefault()

        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        logger.info("Initializing Firebase app")
        return firebase_admin.initialize_app(cred, options)


def _load_firebase_app():
    """Return the Firebase app, or None when its credentials cannot be loaded."""
    try:
        return get_firebase_app()
    except (OSError, ValueError, GoogleAuthError) as e:
        logger.error(f"Firebase app could not be initialized: {e}")
        return None


class FirebaseIdentity:
    """Identity of one request, bound to its Firebase ID token."""

    def __init__(self, token: Optional[str]):
        self.token = token
        self._uid: Optional[str] = None

    def authenticate(self) -> Optional[str]:
        """Return the Firebase UID of the caller, or None when unauthenticated."""
        if self._uid:
            return self._uid
        if not self.token:
            return None

        app = _load_firebase_app()
        if app is None:
            return None

        try:
            decoded = auth.verify_id_token(self.token, app=app)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
                auth.RevokedIdTokenError, auth.CertificateFetchError) as e:
            logger.warning(f"Firebase token rejected: {e}")
            return None

        self._uid = decoded.get("uid")
        return self._uid

    def fetch_profile(self) -> Optional[dict]:
        """Fetch profile data of the authenticated caller from Firebase."""
        uid = self.authenticate()
        if not uid:
            return None

        app = _load_firebase_app()
        if app is None:
            return None

        try:
            user = auth.get_user(uid, app=app)
        except (ValueError, FirebaseError) as e:
            logger.error(f"Failed to fetch Firebase profile for {uid}: {e}")
            return None

        display_name = (user.display_name or "").strip() or None
        return {
            "email": user.email,
            "name": display_name,
            "first_name": display_name.split()[0] if display_name else None,
            "image_url": user.photo_url,
        }


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Extract the bearer token from the Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None
