import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Iterable

from minbar.config import settings
from minbar.engine.errors import SessionAlreadyActive
from minbar.engine.input import InputRouter
from minbar.engine.segments import Segment
from minbar.engine.session import Session, ViewMode

logger = logging.getLogger(__name__)


class SessionHost:
    """Runs at most one live session and owns its resources.

    Resources acquired by :meth:`start` and released by :meth:`exit`:

    1. **Tick task**: an asyncio task on the running loop that calls
       ``session.tick()`` every ``tick_interval`` seconds.  It is the only
       asynchronous driver; everything else runs synchronously in the
       caller.

    2. **Input registration**: the :class:`InputRouter` is attached to the
       session so key presses reach its navigation.

    ``exit()`` cancels the task, detaches the router and closes the session
    in one synchronous call; after it returns no tick or key press can
    change the session.  Prefer :meth:`live`, which guarantees ``exit()``
    even when the body raises.
    """

    def __init__(
        self,
        *,
        tick_interval: float | None = None,
        router: InputRouter | None = None,
        view_mode: ViewMode | str | None = None,
    ) -> None:
        self.tick_interval = (
            tick_interval if tick_interval is not None else settings.tick_interval_seconds
        )
        self.router = router or InputRouter(settings.next_keys, settings.previous_keys)
        self.view_mode = ViewMode(view_mode or settings.default_view_mode)

        self._session: Session | None = None
        self._ticker: asyncio.Task | None = None

        # Callback registries
        self._render_callbacks: list[Callable[[Session], None]] = []
        self._exit_callbacks: list[Callable[[Session], None]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def on_render(self, fn: Callable[[Session], None]) -> None:
        """Register a callback invoked with the session after every change.

        Called once on start, then for each index change, tick, play/pause
        and view-mode switch.  Runs on the event loop thread.
        """
        self._render_callbacks.append(fn)

    def on_exit(self, fn: Callable[[Session], None]) -> None:
        """Register a callback invoked with the closed session on exit."""
        self._exit_callbacks.append(fn)

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def start(self, segments: Iterable[Segment]) -> Session:
        """Create the session and acquire its tick task and input registration.

        Must be called from a running event loop.  Raises
        :class:`InvalidSession` for an empty script and
        :class:`SessionAlreadyActive` if a session is already live.
        """
        if self._session is not None:
            raise SessionAlreadyActive("A live session is already running")

        loop = asyncio.get_running_loop()
        session = Session(segments, view_mode=self.view_mode, on_change=self._render)

        self._session = session
        self.router.attach(session)
        self._ticker = loop.create_task(self._tick_loop(session))

        logger.info(
            "Live session started: %d segments, %ds first segment",
            len(session.segments),
            session.remaining_seconds,
        )
        self._render(session)
        return session

    def exit(self) -> None:
        """Release the tick task and input registration.  Idempotent."""
        session = self._session
        if session is None:
            return

        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        self.router.detach()
        session.close()
        self._session = None

        logger.info(
            "Live session ended at segment %d/%d after %ds",
            session.active_index + 1,
            len(session.segments),
            session.elapsed_seconds,
        )
        for fn in self._exit_callbacks:
            try:
                fn(session)
            except Exception:
                logger.exception("Exit callback failed")

    @asynccontextmanager
    async def live(self, segments: Iterable[Segment]) -> AsyncIterator[Session]:
        """Scope a session to an ``async with`` block::

            async with host.live(segments) as session:
                session.play()
                ...
        """
        session = self.start(segments)
        try:
            yield session
        finally:
            self.exit()

    def handle_key(self, key: str) -> bool:
        """Forward a raw key press to the input router."""
        return self.router.dispatch(key)

    # ------------------------------------------------------------------
    # Tick task (event loop)
    # ------------------------------------------------------------------

    async def _tick_loop(self, session: Session) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            # Schedule against the loop clock so slow renders don't drift
            next_at += self.tick_interval
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            session.tick()

    def _render(self, session: Session) -> None:
        for fn in self._render_callbacks:
            try:
                fn(session)
            except Exception:
                logger.exception("Render callback failed")
