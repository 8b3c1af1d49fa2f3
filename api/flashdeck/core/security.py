"""
Caller identity and plan entitlements.

The authenticated identity is resolved once per request and then passed
explicitly into every service call; nothing reads it from ambient state.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional
import logging

from fastapi import Depends, Header
from sqlmodel import Session

from flashdeck.core.config import settings
from flashdeck.core.database import get_session
from flashdeck.core.exceptions import AuthenticationError
from flashdeck.models.enums import Feature, Plan
from flashdeck.models.user import User

logger = logging.getLogger(__name__)


PLAN_FEATURES = {
    Plan.FREE: frozenset(),
    Plan.PRO: frozenset({Feature.UNLIMITED_DECKS, Feature.AI_FLASHCARD_GENERATION}),
}


def features_for_plan(plan) -> FrozenSet[Feature]:
    """Resolve the feature set granted by a plan. Unknown plans grant nothing."""
    try:
        return PLAN_FEATURES[Plan(plan)]
    except ValueError:
        logger.warning(f"Unknown plan '{plan}', granting no features")
        return frozenset()


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller: user id plus the features their plan grants."""
    id: int
    plan: Plan = Plan.FREE
    features: FrozenSet[Feature] = field(default_factory=frozenset)

    def has(self, feature: Feature) -> bool:
        return feature in self.features

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(id=user.id, plan=user.plan, features=features_for_plan(user.plan))


def require_user(current_user: Optional[CurrentUser]) -> CurrentUser:
    """Return the caller or fail with AuthenticationError when absent."""
    if current_user is None:
        raise AuthenticationError()
    return current_user


def get_optional_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    session: Session = Depends(get_session)
) -> Optional[CurrentUser]:
    """
    Resolve the X-User-Id header to a CurrentUser.

    Returns None when the header is missing, malformed, or names no user, so
    the action layer decides how to fail.
    """
    if not x_user_id:
        return None
    try:
        user_id = int(x_user_id)
    except ValueError:
        logger.warning(f"Malformed X-User-Id header: {x_user_id!r}")
        return None

    user = session.get(User, user_id)
    if not user:
        return None
    return CurrentUser.from_user(user)


def deck_limit_for(current_user: CurrentUser) -> Optional[int]:
    """Maximum number of decks the caller may own, or None when unlimited."""
    if current_user.has(Feature.UNLIMITED_DECKS):
        return None
    return settings.free_deck_limit
