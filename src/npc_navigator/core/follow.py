"""Follow loop: repeatedly re-aim an agent at a possibly moving target.

State machine::

    idle --(target resolved)--> running --(cancel)--> cancelled
      \\________________________(cancel)_______________/

The loop suspends in three places: while the target waits to spawn,
inside the path query, and during the delay between cycles. All of
them observe the loop's ``CancellationToken``. A cycle that has
started walking always finishes before the loop stops.

Tokens are driven from the event loop thread that runs the follow
task; cross-thread callers must go through
``loop.call_soon_threadsafe(token.cancel)``.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from npc_navigator.core.targets import Target
from npc_navigator.schemas import MoveSettings
from npc_navigator.utils.logging import LogLevel, StructuredLogger

if TYPE_CHECKING:
    from npc_navigator.core.controller import MoveController

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationCancelled(Exception):
    """Raised by ``CancellationToken.guard`` when the token fires first."""


class CancellationToken:
    """Cooperative cancellation flag with awaitable checkpoints."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, delay: float) -> bool:
        """Sleep for ``delay`` seconds unless cancelled first.

        Returns:
            True if the token is cancelled when the sleep ends.
        """
        if self.cancelled:
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def guard(self, aw: Awaitable[T]) -> T:
        """Await ``aw`` unless the token is cancelled first.

        Raises:
            OperationCancelled: If cancellation won the race; ``aw`` is
                cancelled in that case.
        """
        if self.cancelled:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise OperationCancelled()

        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            pending = not task.done()
            if pending:
                task.cancel()
                # cancel() only requests it; let the task unwind first
                await asyncio.gather(task, return_exceptions=True)

        if pending or task.cancelled():
            raise OperationCancelled()
        return task.result()


class FollowState(str, Enum):
    idle = "idle"
    running = "running"
    cancelled = "cancelled"


class FollowLoop:
    """Live, cancellable state of one follow operation.

    Created and started by ``NavigationAgent.follow``; the agent keeps
    at most one active loop.
    """

    def __init__(
        self,
        controller: MoveController,
        target: Target,
        settings: MoveSettings,
        interval: float,
        *,
        agent_name: str,
        slog: StructuredLogger | None = None,
        on_finished: Callable[[FollowLoop], None] | None = None,
    ) -> None:
        self._controller = controller
        self._target = target
        self._settings = settings
        self._interval = interval
        self._agent_name = agent_name
        self._slog = slog
        self._on_finished = on_finished

        self._token = CancellationToken()
        self._state = FollowState.idle
        self._task: asyncio.Task | None = None
        self._cycles = 0
        self._successful_cycles = 0
        self.error: BaseException | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> FollowState:
        return self._state

    @property
    def target(self) -> Target:
        return self._target

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def cycles(self) -> int:
        """Cycles started so far."""
        return self._cycles

    @property
    def successful_cycles(self) -> int:
        return self._successful_cycles

    @property
    def active(self) -> bool:
        """True until cancellation has been requested or the loop ended."""
        return self._state is not FollowState.cancelled and not self._token.cancelled

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self) -> FollowLoop:
        """Schedule the loop on the running event loop and return at once.

        A target that resolves without waiting puts the loop in
        ``running`` before this returns; an unspawned actor leaves it
        ``idle`` until the spawn.

        Raises:
            RuntimeError: If already started or no event loop is running.
        """
        if self._task is not None:
            raise RuntimeError("Follow loop already started")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"follow:{self._agent_name}")
        if self._target.ready:
            self._transition(FollowState.running)
        return self

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next checkpoint."""
        if not self._token.cancelled:
            logger.debug("Follow loop for %s: cancellation requested", self._agent_name)
        self._token.cancel()

    async def wait(self) -> None:
        """Wait until the loop has stopped."""
        if self._task is not None:
            await asyncio.wait({self._task})

    # ------------------------------------------------------------------
    # Loop body
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        try:
            if self._state is FollowState.idle:
                await self._token.guard(self._target.resolve())
                self._transition(FollowState.running)

            while not self._token.cancelled:
                point = await self._token.guard(self._target.resolve())
                self._cycles += 1
                logger.debug("Follow %s cycle %d -> %s", self._agent_name, self._cycles, point)
                if await self._controller.move_to(point, self._settings, token=self._token):
                    self._successful_cycles += 1
                if await self._token.sleep(self._interval):
                    break
        except OperationCancelled:
            pass
        except Exception as e:
            self.error = e
            logger.exception("Follow loop for %s stopped on error", self._agent_name)
        finally:
            self._transition(FollowState.cancelled)
            if self._on_finished is not None:
                self._on_finished(self)

    def _transition(self, new_state: FollowState) -> None:
        if new_state is self._state:
            return
        old, self._state = self._state, new_state
        if self._slog is not None:
            self._slog.follow(
                f"{old.value} -> {new_state.value} after {self._cycles} cycle(s)",
                level=LogLevel.INFO,
                agent=self._agent_name,
                cycle=self._cycles,
                target=self._target.describe(),
            )
        logger.debug("Follow %s: %s -> %s", self._agent_name, old.value, new_state.value)
