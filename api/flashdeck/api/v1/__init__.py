"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from flashdeck.api.v1.endpoints import (
    auth, dashboard, decks, cards, card_generation, progress
)

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(auth.router)
api_router.include_router(dashboard.router)
api_router.include_router(decks.router)
api_router.include_router(cards.router)
api_router.include_router(card_generation.router)
api_router.include_router(progress.router)
