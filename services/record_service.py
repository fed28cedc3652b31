"""
Record Service
Handlers for creating, deleting, listing and aggregating a user's expense records.
Every handler returns a plain result dict and never raises to the caller.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import settings
from core.errors import (
    AuthError,
    ExpenseTrackerError,
    NotFoundError,
    ValidationError,
)
from models.models import Record, User
from services.aggregation import best_worst, count_positive, total_amount
from services.cache_service import ViewCache
from services.user_service import UserService
from utils.logger import logger

MISSING_FIELDS_ERROR = "Text, amount, category, or date is missing"
INVALID_AMOUNT_ERROR = "Amount must be a number"
INVALID_DATE_ERROR = "Invalid date format"
FOREIGN_KEY_ERROR = "Database user reference error. Please try logging out and back in."
DUPLICATE_RECORD_ERROR = "Duplicate record detected."
UNEXPECTED_CREATE_ERROR = "An unexpected error occurred while adding the expense record."
DATABASE_ERROR = "Database error"
USER_NOT_IN_DATABASE = "User not found in database"

# PostgreSQL SQLSTATE codes
FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def parse_record_date(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` into 12:00:00 UTC of that calendar day.

    Noon keeps the calendar day stable for every client timezone.
    """
    try:
        year, month, day = (int(part) for part in str(value).split("-"))
        return datetime(year, month, day, 12, 0, 0, tzinfo=timezone.utc)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid date format: {value!r} ({e})")
        raise ValidationError(INVALID_DATE_ERROR)


def to_iso_instant(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC instant with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def classify_integrity_error(error: IntegrityError) -> Optional[str]:
    """Return 'foreign_key', 'unique' or None for a constraint violation."""
    code = getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)
    if code == FOREIGN_KEY_VIOLATION:
        return "foreign_key"
    if code == UNIQUE_VIOLATION:
        return "unique"

    message = str(error.orig).lower()
    if "foreign key" in message:
        return "foreign_key"
    if "unique" in message or "duplicate" in message:
        return "unique"
    return None


def _is_missing(value: Any) -> bool:
    return value is None or str(value) == ""


class RecordService:
    """Expense record handlers scoped to the caller's local user.

    The identity handle and the database session are injected per request.
    The identity exposes ``authenticate()`` and ``fetch_profile()``.
    """

    def __init__(self, db: Session, identity, view_cache: ViewCache):
        self.db = db
        self.identity = identity
        self.view_cache = view_cache
        self.users = UserService(db)

    def _authenticate(self, message: str) -> str:
        external_id = self.identity.authenticate()
        if not external_id:
            raise AuthError(message)
        return external_id

    def _existing_user(self, external_id: str) -> User:
        user = self.users.get_user(external_id)
        if not user:
            raise NotFoundError(USER_NOT_IN_DATABASE)
        return user

    async def add_record(self, text: Any, amount: Any, category: Any, date: Any) -> Dict[str, Any]:
        """Create a record for the caller, provisioning the local user if needed."""
        try:
            if any(_is_missing(value) for value in (text, amount, category, date)):
                raise ValidationError(MISSING_FIELDS_ERROR)

            try:
                amount_value = float(amount)
            except (TypeError, ValueError):
                raise ValidationError(INVALID_AMOUNT_ERROR)
            if not math.isfinite(amount_value):
                raise ValidationError(INVALID_AMOUNT_ERROR)

            record_date = parse_record_date(date)
            external_id = self._authenticate("User not authenticated")
        except ExpenseTrackerError as e:
            return {"error": e.message}

        try:
            user = self.users.get_or_create_user(external_id, self.identity)

            record = Record(
                text=str(text),
                amount=amount_value,
                category=str(category),
                date=record_date,
                user_id=user.id,
            )
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except ExpenseTrackerError as e:
            return {"error": e.message}
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Error adding expense record: {e}")
            kind = classify_integrity_error(e)
            if kind == "foreign_key":
                return {"error": FOREIGN_KEY_ERROR}
            if kind == "unique":
                return {"error": DUPLICATE_RECORD_ERROR}
            return {"error": UNEXPECTED_CREATE_ERROR}
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error adding expense record: {e}")
            return {"error": UNEXPECTED_CREATE_ERROR}

        logger.info(f"Created record {record.id} for user {user.id}")
        self.view_cache.invalidate(settings.ROOT_VIEW_PATH)

        return {
            "data": {
                "text": record.text,
                "amount": record.amount,
                "category": record.category,
                "date": to_iso_instant(record_date),
            }
        }

    async def delete_record(self, record_id: str) -> Dict[str, Any]:
        """Delete a record only when it belongs to the caller."""
        try:
            external_id = self._authenticate("User not found")
        except AuthError as e:
            return {"error": e.message}

        try:
            user = self._existing_user(external_id)
            deleted = (
                self.db.query(Record)
                .filter(Record.id == record_id, Record.user_id == user.id)
                .delete(synchronize_session=False)
            )
            if not deleted:
                logger.warning(f"Record {record_id} not found for user {user.id}")
                raise NotFoundError(DATABASE_ERROR)
            self.db.commit()
        except NotFoundError as e:
            self.db.rollback()
            return {"error": e.message}
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting record: {e}")
            return {"error": DATABASE_ERROR}

        logger.info(f"Deleted record {record_id} for user {user.id}")
        self.view_cache.invalidate(settings.ROOT_VIEW_PATH)
        return {"message": "Record deleted"}

    async def get_records(self) -> Dict[str, Any]:
        """Return the caller's most recent records, newest date first."""
        try:
            external_id = self._authenticate("User not authenticated")
        except AuthError as e:
            return {"error": e.message}

        try:
            user = self._existing_user(external_id)
            records = (
                self.db.query(Record)
                .filter(Record.user_id == user.id)
                .order_by(Record.date.desc())
                .limit(settings.RECENT_RECORDS_LIMIT)
                .all()
            )
        except NotFoundError as e:
            return {"error": e.message}
        except SQLAlchemyError as e:
            logger.error(f"Error fetching records: {e}")
            return {"error": DATABASE_ERROR}

        return {"records": records}

    async def get_best_worst_expense(self) -> Dict[str, Any]:
        """Return the highest and lowest amount among the caller's records."""
        try:
            external_id = self._authenticate("User not found")
        except AuthError as e:
            return {"error": e.message}

        try:
            user = self._existing_user(external_id)
            # only the amount column is needed
            rows = self.db.query(Record.amount).filter(Record.user_id == user.id).all()
        except NotFoundError as e:
            return {"error": e.message}
        except SQLAlchemyError as e:
            logger.error(f"Error fetching expense amounts: {e}")
            return {"error": DATABASE_ERROR}

        best, worst = best_worst(row.amount for row in rows)
        return {"bestExpense": best, "worstExpense": worst}

    async def get_user_record(self) -> Dict[str, Any]:
        """Return the total amount and the number of positive-amount records."""
        try:
            external_id = self._authenticate("User not authenticated")
        except AuthError as e:
            return {"error": e.message}

        try:
            user = self._existing_user(external_id)
            records = self.db.query(Record).filter(Record.user_id == user.id).all()
        except NotFoundError as e:
            return {"error": e.message}
        except SQLAlchemyError as e:
            logger.error(f"Error fetching user record: {e}")
            return {"error": DATABASE_ERROR}

        amounts = [record.amount for record in records]
        return {"record": total_amount(amounts), "daysWithRecords": count_positive(amounts)}
