"""
Dashboard endpoint.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import Optional
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser, get_optional_user, require_user
from flashdeck.schemas.deck import DashboardResponse
from flashdeck.services.page_service import get_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Get the caller's decks, most recently updated first, with plan usage."""
    return get_dashboard(session, require_user(current_user))
