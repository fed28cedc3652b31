from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ProviderError
from models.models import User
from utils.logger import logger

DEFAULT_USER_NAME = "User"


class UserService:
    """Maps external identities to local user rows."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, external_id: str) -> Optional[User]:
        """Find the local user for an external identity."""
        return self.db.query(User).filter(User.external_id == external_id).first()

    def get_or_create_user(self, external_id: str, identity) -> User:
        """Find the local user, creating it from the provider profile on first sight.

        The insert is guarded by the unique constraint on ``external_id``: when a
        concurrent request created the row first, the insert is rolled back and
        the existing row is returned.
        """
        user = self.get_user(external_id)
        if user:
            return user

        profile = identity.fetch_profile()
        if not profile:
            raise ProviderError("Unable to get user details from provider")

        user = User(
            external_id=external_id,
            email=profile.get("email") or f"{external_id}@temp.com",
            name=profile.get("name") or profile.get("first_name") or DEFAULT_USER_NAME,
            image_url=profile.get("image_url"),
        )

        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get_user(external_id)
            if not existing:
                raise
            logger.info(f"User {external_id} was provisioned concurrently, reusing existing row")
            return existing

        self.db.refresh(user)
        logger.info(f"Provisioned local user {user.id} for external id {external_id}")
        return user
