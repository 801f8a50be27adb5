import logging
from typing import Iterable

from minbar.engine.session import Session

logger = logging.getLogger(__name__)

DEFAULT_NEXT_KEYS = ("ArrowRight", " ", "Space")
DEFAULT_PREVIOUS_KEYS = ("ArrowLeft",)


class InputRouter:
    """Routes key presses to the attached session's navigation.

    The router only reacts while attached.  The session host attaches it on
    start and detaches it on exit, so key events arriving after teardown
    are dropped.
    """

    def __init__(
        self,
        next_keys: Iterable[str] = DEFAULT_NEXT_KEYS,
        previous_keys: Iterable[str] = DEFAULT_PREVIOUS_KEYS,
    ) -> None:
        self.next_keys = frozenset(next_keys)
        self.previous_keys = frozenset(previous_keys)
        self._session: Session | None = None

    @property
    def is_attached(self) -> bool:
        return self._session is not None

    def attach(self, session: Session) -> None:
        self._session = session

    def detach(self) -> None:
        self._session = None

    def dispatch(self, key: str) -> bool:
        """Handle one key press.  Returns True if the key is bound."""
        session = self._session
        if session is None:
            logger.debug("Dropping key %r: no live session", key)
            return False
        if key in self.next_keys:
            session.go_next()
            return True
        if key in self.previous_keys:
            session.go_previous()
            return True
        return False
