"""
Script to create a demo user with one deck of Indonesian vocabulary.
"""
import sys
from sqlmodel import Session, select
from flashdeck.core.database import engine, init_db
from flashdeck.core.security import CurrentUser
from flashdeck.actions.decks import create_deck_action
from flashdeck.actions.cards import create_card_action
from flashdeck.actions.progress import mark_card_learned_action
from flashdeck.models import User
import logging

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEMO_CARDS = [
    ("Dog", "Anjing"),
    ("Cat", "Kucing"),
    ("House", "Rumah"),
]


def seed_demo_data():
    """Create the demo user, a deck with three cards, and mark the first card learned."""
    init_db()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.username == "demo")).first()
        if not user:
            user = User(username="demo", email="demo@example.com", password=User.hash_password("demo1234"))
            session.add(user)
            session.commit()
            session.refresh(user)
            logger.info(f"Created demo user {user.id}")

        current_user = CurrentUser.from_user(user)
        deck = create_deck_action(session, current_user, {
            "title": "Indonesian Language Basics",
            "description": "Learn basic Indonesian vocabulary from English",
        }).deck
        logger.info(f"Created deck {deck.id}")

        cards = [
            create_card_action(session, current_user, {"deck_id": deck.id, "front": front, "back": back}).card
            for front, back in DEMO_CARDS
        ]
        logger.info(f"Created {len(cards)} cards")

        mark_card_learned_action(session, current_user, {"card_id": cards[0].id, "learned": True})
        logger.info(f"Marked card {cards[0].id} learned")


if __name__ == "__main__":
    logger.info("Seeding demo data...")
    try:
        seed_demo_data()
        logger.info("Successfully completed!")
    except Exception as e:
        logger.error("Error while seeding demo data: %s", e, exc_info=True)
        sys.exit(1)
