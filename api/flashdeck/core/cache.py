"""
Process-wide cache of rendered read views.

Read endpoints store their payloads under (path, user_id); mutations call
invalidate() for every path whose content they changed so the next read is
rebuilt from the database.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def dashboard_path() -> str:
    return "/dashboard"


def deck_path(deck_id: int) -> str:
    return f"/decks/{deck_id}"


def study_path(deck_id: int) -> str:
    return f"/decks/{deck_id}/study"


class ViewCache:
    """
    Thread-safe mapping of (path, user_id) to a cached payload.

    Every invalidation bumps a generation counter for the path (or user). A
    payload built while its path or user was invalidated is returned to its
    caller but not stored.
    """

    def __init__(self):
        self._entries: Dict[Tuple[str, int], Any] = {}
        self._path_generations: Dict[str, int] = {}
        self._user_generations: Dict[int, int] = {}
        self._lock = threading.Lock()

    def get(self, path: str, user_id: int) -> Optional[Any]:
        with self._lock:
            return self._entries.get((path, user_id))

    def set(self, path: str, user_id: int, payload: Any) -> None:
        with self._lock:
            self._entries[(path, user_id)] = payload

    def _generation(self, path: str, user_id: int) -> Tuple[int, int]:
        return self._path_generations.get(path, 0), self._user_generations.get(user_id, 0)

    def get_or_build(self, path: str, user_id: int, builder: Callable[[], Any]) -> Any:
        with self._lock:
            cached = self._entries.get((path, user_id))
            generation = self._generation(path, user_id)
        if cached is not None:
            return cached

        payload = builder()

        with self._lock:
            if self._generation(path, user_id) == generation:
                self._entries[(path, user_id)] = payload
            else:
                logger.debug(f"Discarded view for {path} (user {user_id}) invalidated while building")
        return payload

    def invalidate(self, *paths: str) -> None:
        """Drop every cached entry for the given paths, for all users."""
        targets = set(paths)
        with self._lock:
            for path in targets:
                self._path_generations[path] = self._path_generations.get(path, 0) + 1
            stale = [key for key in self._entries if key[0] in targets]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cached views for {sorted(targets)}")

    def invalidate_user(self, user_id: int) -> None:
        """Drop every cached entry of one user, e.g. after a plan change."""
        with self._lock:
            self._user_generations[user_id] = self._user_generations.get(user_id, 0) + 1
            for key in [key for key in self._entries if key[1] == user_id]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


view_cache = ViewCache()


def invalidate_deck_views(deck_id: int, include_dashboard: bool = False) -> None:
    """Invalidate the deck page and study page of a deck, optionally the dashboard too."""
    paths = [deck_path(deck_id), study_path(deck_id)]
    if include_dashboard:
        paths.append(dashboard_path())
    view_cache.invalidate(*paths)
