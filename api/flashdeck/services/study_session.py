"""
Study session controller.

Holds the transient state of one study run over a fixed, ordered list of
cards: the current position, whether the card is flipped, and which cards
are learned. Learned changes are applied optimistically and written through
a persistence callable; if the write fails the change is reverted and the
failure is reported back to the caller.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Set

from flashdeck.core.exceptions import FlashdeckException

logger = logging.getLogger(__name__)

# (card_id, learned) -> anything; raises on failure
PersistLearned = Callable[[int, bool], object]

FLIP_KEYS = (" ", "Enter")
NEXT_KEYS = ("ArrowRight",)
PREVIOUS_KEYS = ("ArrowLeft",)
TOGGLE_LEARNED_KEYS = ("l", "L")


def calculate_progress_percentage(learned_count: int, total_cards: int) -> float:
    """Share of learned cards as a percentage; 0 for an empty deck."""
    if total_cards <= 0:
        return 0.0
    return learned_count / total_cards * 100


@dataclass
class ToggleLearnedResult:
    """Outcome of a learned toggle."""
    card_id: Optional[int]
    learned: bool
    success: bool
    message: Optional[str] = None


class StudySession:
    """
    State machine for flipping through a deck's cards.

    Cards are anything with an ``id`` attribute (Card models or CardResponse
    schemas). The order of ``cards`` is the study order and never changes.
    """

    def __init__(
        self,
        cards: Sequence,
        learned_card_ids: Iterable[int] = (),
        persist_learned: Optional[PersistLearned] = None
    ):
        self.cards: List = list(cards)
        self.current_index = 0
        self.is_flipped = False
        self.is_pending = False
        card_ids = {card.id for card in self.cards}
        # Progress rows for cards no longer in the deck are ignored
        self.learned_ids: Set[int] = {card_id for card_id in learned_card_ids if card_id in card_ids}
        self._persist_learned = persist_learned

    @classmethod
    def from_progress(cls, cards: Sequence, progress_rows: Iterable, persist_learned: Optional[PersistLearned] = None):
        """Seed learned ids from persisted progress rows (objects with card_id and is_learned)."""
        learned = [row.card_id for row in progress_rows if row.is_learned]
        return cls(cards, learned_card_ids=learned, persist_learned=persist_learned)

    @property
    def total_cards(self) -> int:
        return len(self.cards)

    @property
    def current_card(self):
        if not self.cards:
            return None
        return self.cards[self.current_index]

    @property
    def is_current_card_learned(self) -> bool:
        card = self.current_card
        return card is not None and card.id in self.learned_ids

    @property
    def learned_count(self) -> int:
        return len(self.learned_ids)

    @property
    def progress_percentage(self) -> float:
        return calculate_progress_percentage(self.learned_count, self.total_cards)

    @property
    def has_next(self) -> bool:
        return self.current_index < self.total_cards - 1

    @property
    def has_previous(self) -> bool:
        return self.current_index > 0

    def flip(self) -> bool:
        """Turn the current card over. Nothing is persisted."""
        if self.current_card is not None:
            self.is_flipped = not self.is_flipped
        return self.is_flipped

    def next(self) -> int:
        """Advance one card, stopping at the last one. Always shows the front."""
        if self.has_next:
            self.current_index += 1
        self.is_flipped = False
        return self.current_index

    def previous(self) -> int:
        """Go back one card, stopping at the first one. Always shows the front."""
        if self.has_previous:
            self.current_index -= 1
        self.is_flipped = False
        return self.current_index

    def toggle_learned(self) -> ToggleLearnedResult:
        """
        Flip the learned flag of the current card and persist it.

        The local set is updated first. If persistence raises, the local
        change is undone and an unsuccessful result carries the message to
        show the user. Toggles are refused while another one is in flight.
        """
        card = self.current_card
        if card is None:
            return ToggleLearnedResult(card_id=None, learned=False, success=False, message="No card to update")
        if self.is_pending:
            return ToggleLearnedResult(
                card_id=card.id,
                learned=self.is_current_card_learned,
                success=False,
                message="Another update is still in progress"
            )

        previous_state = card.id in self.learned_ids
        new_state = not previous_state
        self._apply_learned(card.id, new_state)

        if self._persist_learned is None:
            return ToggleLearnedResult(card_id=card.id, learned=new_state, success=True)

        self.is_pending = True
        try:
            self._persist_learned(card.id, new_state)
        except FlashdeckException as e:
            self._apply_learned(card.id, previous_state)
            logger.warning(f"Failed to update progress for card {card.id}: {str(e)}")
            return ToggleLearnedResult(card_id=card.id, learned=previous_state, success=False, message=str(e))
        except Exception as e:
            self._apply_learned(card.id, previous_state)
            logger.error(f"Failed to update progress for card {card.id}", exc_info=e)
            return ToggleLearnedResult(
                card_id=card.id,
                learned=previous_state,
                success=False,
                message="Failed to update card progress"
            )
        finally:
            self.is_pending = False

        return ToggleLearnedResult(card_id=card.id, learned=new_state, success=True)

    def handle_key(self, key: str):
        """
        Apply a keyboard shortcut.

        Space/Enter flips, ArrowRight/ArrowLeft navigate, l/L toggles learned.
        Returns the result of the triggered operation, or None for unbound keys.
        """
        if key in FLIP_KEYS:
            return self.flip()
        if key in NEXT_KEYS:
            return self.next()
        if key in PREVIOUS_KEYS:
            return self.previous()
        if key in TOGGLE_LEARNED_KEYS:
            return self.toggle_learned()
        return None

    def _apply_learned(self, card_id: int, learned: bool) -> None:
        if learned:
            self.learned_ids.add(card_id)
        else:
            self.learned_ids.discard(card_id)
