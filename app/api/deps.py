from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import Forbidden, Unauthenticated
from app.services.auth import AuthContext, AuthService, decode_access_token
from app.services.events import EventService
from app.services.queries import EventQueryService
from app.services.ratings import RatingAggregator
from app.services.registration import RegistrationEngine

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthContext]:
    """Identity of the caller, or None for anonymous requests."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


async def get_current_user(
    user: Optional[AuthContext] = Depends(get_optional_user),
) -> AuthContext:
    if user is None:
        raise Unauthenticated()
    return user


async def require_admin(user: AuthContext = Depends(get_current_user)) -> AuthContext:
    if not user.is_admin:
        raise Forbidden("Administrator access required")
    return user


def get_registration_engine(db: AsyncSession = Depends(get_db)) -> RegistrationEngine:
    return RegistrationEngine(db)


def get_rating_aggregator(db: AsyncSession = Depends(get_db)) -> RatingAggregator:
    return RatingAggregator(db)


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


def get_query_service(db: AsyncSession = Depends(get_db)) -> EventQueryService:
    return EventQueryService(db)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)
