"""
Study progress actions.
"""
from typing import Optional, Union

from sqlmodel import Session

from flashdeck.actions.base import action_boundary
from flashdeck.core.cache import study_path, view_cache
from flashdeck.core.security import CurrentUser, require_user
from flashdeck.schemas.progress import (
    MarkCardLearnedRequest,
    MarkCardLearnedResponse,
    ProgressResponse,
)
from flashdeck.schemas.utils import parse_input
from flashdeck.services import card_service, progress_service


def mark_card_learned_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[MarkCardLearnedRequest, dict]
) -> MarkCardLearnedResponse:
    """Set the caller's learned flag for a card and refresh that deck's study view."""
    current_user = require_user(current_user)
    request = parse_input(MarkCardLearnedRequest, data)

    with action_boundary(session, "Failed to update card progress"):
        card = card_service.require_card(session, request.card_id, current_user.id)
        deck_id = card.deck_id
        progress = progress_service.mark_card_learned(
            session,
            request.card_id,
            current_user.id,
            learned=request.learned
        )
        response = MarkCardLearnedResponse(progress=ProgressResponse.model_validate(progress))

    view_cache.invalidate(study_path(deck_id))
    return response
