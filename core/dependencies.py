from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from connect_db import get_db
from firebase_auth import FirebaseIdentity, get_bearer_token
from services.cache_service import ViewCache
from services.record_service import RecordService

# Global service instances (will be set by main.py)
view_cache: Optional[ViewCache] = None

def get_view_cache() -> ViewCache:
    """Returns the process-wide view cache, creating it on first use."""
    global view_cache
    if view_cache is None:
        view_cache = ViewCache()
    return view_cache

def get_identity(token: Optional[str] = Depends(get_bearer_token)) -> FirebaseIdentity:
    """Identity handle bound to the bearer token of the current request."""
    return FirebaseIdentity(token)

def get_record_service(
    db: Session = Depends(get_db),
    identity=Depends(get_identity),
    cache: ViewCache = Depends(get_view_cache),
) -> RecordService:
    return RecordService(db, identity, cache)

def set_services(cache: ViewCache):
    """Set the global service instances."""
    global view_cache
    view_cache = cache
