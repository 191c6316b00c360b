"""
Review session: the ordered queue a user works through.

After every answer the remaining items are re-read from the store and
re-tiered, so an item whose state changed mid-session moves to where it
now belongs. While the session is active a poller periodically looks for
items that became due purely through the passage of time and splices them
in right after the current item.
"""

import logging
from collections.abc import Awaitable, Callable

from cadence.application.scheduling.state_machine import ItemStateMachine
from cadence.domain.clock import Clock, SystemClock
from cadence.domain.constants import DEFAULT_POLL_INTERVAL
from cadence.domain.exceptions import ItemNotFound, StorageError
from cadence.domain.interfaces import ItemRepository
from cadence.domain.models import Grade, Item, SessionMode, TierBreakdown

from .poller import DueCheckPoller
from .prioritizer import apply_new_limit, breakdown, prioritize

logger = logging.getLogger(__name__)

PollerFactory = Callable[[Callable[[], Awaitable[object]], float], DueCheckPoller]


class ReviewSession:
    """
    Session queue manager.

    Not re-entrant: callers must await each `answer` before issuing the next.
    Position policy after an answer is "stay put, or wrap to the start when
    the old position falls off the end"; it is not a per-item cursor.
    """

    def __init__(
        self,
        repo: ItemRepository,
        clock: Clock | None = None,
        state_machine: ItemStateMachine | None = None,
        poll_interval: float | None = DEFAULT_POLL_INTERVAL,
        poller_factory: PollerFactory | None = None,
    ):
        """
        Args:
            repo: Storage collaborator.
            clock: Time source; wall clock if omitted.
            state_machine: Grading implementation; default if omitted.
            poll_interval: Seconds between due checks. None disables polling.
            poller_factory: Builds the poller; DueCheckPoller if omitted.
        """
        self._repo = repo
        self._clock = clock or SystemClock()
        self._machine = state_machine or ItemStateMachine()
        self._poll_interval = poll_interval
        self._poller_factory = poller_factory or DueCheckPoller
        self._poller: DueCheckPoller | None = None

        self.mode = SessionMode.DUE
        self.position = 0
        self.active = False
        self._queue: list[Item] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(
        self, mode: SessionMode | str = SessionMode.DUE, new_limit: int | None = None
    ) -> "ReviewSession":
        """
        Load and prioritize the session's items.

        Args:
            mode: "due" loads only due items; "all" loads everything.
            new_limit: Optional cap on new items admitted to the queue.
        """
        self._stop_polling()

        self.mode = SessionMode(mode)
        now = self._clock.now()
        if self.mode == SessionMode.DUE:
            items = await self._repo.load_due(now)
        else:
            items = await self._repo.load_all()

        self._queue = apply_new_limit(prioritize(items, now), new_limit)
        self.position = 0
        self.active = True

        counts = breakdown(self._queue, now)
        logger.info(
            f"Session started ({self.mode.value}): {counts.total} items "
            f"[urgent={counts.urgent_due} due={counts.regular_due} "
            f"new={counts.new} future={counts.future}]"
        )

        if self._queue:
            self._start_polling()
        return self

    def end(self) -> None:
        """Stop polling. Safe to call more than once."""
        if self.active:
            logger.info(f"Session ended with {len(self._queue)} items remaining")
        self._stop_polling()
        self.active = False

    # ------------------------------------------------------------------
    # Queue access
    # ------------------------------------------------------------------

    def current(self) -> Item | None:
        """Return the item under the cursor, or None once the session is exhausted."""
        if not self._queue:
            return None
        return self._queue[self.position]

    @property
    def items(self) -> list[Item]:
        return list(self._queue)

    @property
    def remaining(self) -> int:
        return len(self._queue)

    @property
    def is_finished(self) -> bool:
        return not self._queue

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.running

    def breakdown(self) -> TierBreakdown:
        return breakdown(self._queue, self._clock.now())

    # ------------------------------------------------------------------
    # Answering
    # ------------------------------------------------------------------

    async def answer(self, difficulty: Grade | str) -> Item | None:
        """
        Grade the current item, persist it and re-derive the queue.

        Returns:
            The updated item, or None if the session had nothing left.

        Raises:
            InvalidGrade: Before anything is read or written.
            ItemNotFound: The current item was deleted from the store. It is
                dropped from the queue first, so the next item becomes current.
            StorageError: From the store; the queue is unchanged.
        """
        grade_value = Grade.parse(difficulty)

        current = self.current()
        if current is None:
            logger.debug("answer() called on an exhausted session")
            return None

        now = self._clock.now()
        config = await self._repo.load_config()
        try:
            stored = await self._repo.get(current.id)
        except ItemNotFound:
            logger.warning(f"{current.id} was deleted mid-session, dropping it from the queue")
            self._drop(current.id)
            raise
        updated = self._machine.grade(stored, grade_value, config, now)
        await self._repo.save(updated)

        self._drop(current.id)
        if self._queue:
            await self._reprioritize()
            self._settle()
        else:
            logger.info("All items reviewed")
        return updated

    def _drop(self, item_id: str) -> None:
        """Remove an item from the queue by id and settle the cursor."""
        self._queue = [item for item in self._queue if item.id != item_id]
        self._settle()

    def _settle(self) -> None:
        if self.position >= len(self._queue):
            self.position = 0
        if not self._queue:
            self._stop_polling()

    async def _reprioritize(self) -> None:
        try:
            fresh = {item.id: item for item in await self._repo.load_all()}
        except StorageError as e:
            logger.warning(f"Could not refresh remaining items, reordering cached copies: {e}")
            self._queue = prioritize(self._queue, self._clock.now())
            return

        # read the queue after the await so items spliced in meanwhile are kept;
        # items deleted mid-session drop out here
        remaining = [fresh[item.id] for item in self._queue if item.id in fresh]
        self._queue = prioritize(remaining, self._clock.now())

    # ------------------------------------------------------------------
    # Newly-due detection
    # ------------------------------------------------------------------

    async def check_for_newly_due(self) -> list[Item]:
        """
        Splice items that became due since the queue was built in after the
        current item.

        Best effort: storage failures are logged and the queue is left alone.

        Returns:
            The items that were added, in the order they were inserted.
        """
        if not self.active or not self._queue:
            return []

        now = self._clock.now()
        try:
            due = await self._repo.load_due(now)
        except StorageError as e:
            logger.warning(f"Due check failed: {e}")
            return []

        in_session = {item.id for item in self._queue}
        newly_due = prioritize(
            (item for item in due if item.id not in in_session and item.is_due(now)), now
        )
        if not newly_due:
            return []

        split = self.position + 1
        self._queue = self._queue[:split] + newly_due + self._queue[split:]
        logger.info(
            f"Added {len(newly_due)} newly due items to the session "
            f"({len(self._queue)} remaining)"
        )
        return newly_due

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _start_polling(self) -> None:
        if not self._poll_interval:
            return
        self._poller = self._poller_factory(self.check_for_newly_due, self._poll_interval)
        self._poller.start()

    def _stop_polling(self) -> None:
        poller, self._poller = self._poller, None
        if poller is not None:
            poller.cancel()
