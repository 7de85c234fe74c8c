"""Command concurrency core: admission, deadline race and statistics."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional, Set

from ..core.enums import CommandName, ErrorKind, Outcome
from ..core.errors import TrackingError
from .command_stats import CommandStats, StatsSnapshot
from .commands import CommandInvocation, CommandResponse, ExecutionResult
from .player_service import PlayerService
from . import responses

logger = logging.getLogger(__name__)

Responder = Callable[[CommandResponse], Awaitable[None]]

DEFAULT_TIMEOUTS: Dict[str, float] = {
    CommandName.ADD_PLAYER.value: 30.0,
    CommandName.LIST_PLAYERS.value: 10.0,
}


def classify_error(error: BaseException) -> ErrorKind:
    """Map a failure to the category used for the user facing message."""
    if isinstance(error, TrackingError):
        return error.kind
    return ErrorKind.UPSTREAM_FAILURE


class CommandHandler:
    """Runs user commands against the tracking service through a bounded worker pool.

    Every recognised command becomes its own task. A task first waits for one
    of ``pool_size`` slots, then races the tracking service call against the
    command deadline. When the deadline wins, a timeout response is sent right
    away and the call keeps running in the background until it finishes on
    its own; its late outcome is only logged.

    The slot is held, and the command counted as active, until the response
    has been emitted.
    """

    def __init__(
        self,
        player_service: PlayerService,
        stats: Optional[CommandStats] = None,
        pool_size: int = 2,
        timeouts: Optional[Dict[str, float]] = None,
        metrics=None,
    ):
        """Initialize the command handler.

        Args:
            player_service: Tracking service executing the commands
            stats: Statistics tracker, a fresh one when omitted
            pool_size: Maximum number of commands executing at once
            timeouts: Deadline in seconds per command name, merged over the defaults
            metrics: Optional MetricsProvider recording command outcomes
        """
        if pool_size < 1:
            raise ValueError("Worker pool size must be at least 1")

        self.player_service = player_service
        self.stats = stats if stats is not None else CommandStats()
        self.pool_size = pool_size
        self.timeouts = {**DEFAULT_TIMEOUTS, **(timeouts or {})}
        self.metrics = metrics

        self._pool = asyncio.Semaphore(pool_size)
        self._in_flight: Set[asyncio.Task] = set()
        self._abandoned: Set[asyncio.Task] = set()

    @property
    def in_flight_count(self) -> int:
        """Dispatched commands that have not emitted their response yet."""
        return len(self._in_flight)

    @property
    def abandoned_count(self) -> int:
        """Timed out calls still running in the background."""
        return len(self._abandoned)

    def get_stats(self) -> StatsSnapshot:
        return self.stats.snapshot()

    def dispatch(self, invocation: CommandInvocation, respond: Responder) -> Optional[asyncio.Task]:
        """Start processing a command without waiting for it.

        Must be called from the running event loop.

        Returns:
            The task handling the command, or None when the command is unknown
            and was dropped
        """
        command = CommandName.from_string(invocation.name)
        if command is None:
            logger.debug(f"Ignoring unknown command: {invocation.name!r}")
            return None

        task = asyncio.create_task(
            self._run_command(command, invocation, respond),
            name=f"command-{command.value}",
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def drain(self, include_abandoned: bool = False) -> None:
        """Wait until every dispatched command has emitted its response.

        Args:
            include_abandoned: Also wait for timed out calls still running
        """
        pending = set(self._in_flight)
        if include_abandoned:
            pending |= self._abandoned
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _run_command(self, command: CommandName, invocation: CommandInvocation, respond: Responder) -> None:
        async with self._pool:
            self.stats.record_start()
            start_time = time.monotonic()
            outcome: Optional[Outcome] = None
            try:
                if command == CommandName.ADD_PLAYER:
                    response = await self._add_player(invocation)
                else:
                    response = await self._list_players()
                outcome = response.outcome

                try:
                    await respond(response)
                except Exception as e:
                    logger.error(f"Error sending {command.value} response: {e}")
            finally:
                duration = time.monotonic() - start_time
                self.stats.record_end(duration)
                if self.metrics:
                    self.metrics.record_command(
                        command.value, outcome.value if outcome else "cancelled", duration
                    )

    async def _add_player(self, invocation: CommandInvocation) -> CommandResponse:
        command = CommandName.ADD_PLAYER.value
        game_name = invocation.option("pseudo")
        tag_line = invocation.option("tagline")
        server = invocation.option("server").lower()

        result = await self._race(
            command, self.player_service.add_player(game_name, tag_line, server)
        )

        if result.outcome == Outcome.SUCCESS:
            logger.info(f"add_player succeeded for {game_name}#{tag_line} on {server}")
            content = responses.render_add_player_success(result.value)
        elif result.outcome == Outcome.FAILURE:
            logger.info(f"add_player failed for {game_name}#{tag_line} on {server}: {result.error}")
            content = responses.render_add_player_failure(
                result.error_kind, result.error, game_name, tag_line, server
            )
        else:
            logger.warning(f"Add player timed out: {game_name}#{tag_line} on server {server}")
            content = responses.ADD_PLAYER_TIMEOUT_MESSAGE

        return CommandResponse(
            command=command, outcome=result.outcome, content=content, error_kind=result.error_kind
        )

    async def _list_players(self) -> CommandResponse:
        command = CommandName.LIST_PLAYERS.value
        result = await self._race(command, self.player_service.get_all_players())

        if result.outcome == Outcome.SUCCESS:
            content = responses.render_players_list(result.value)
        elif result.outcome == Outcome.FAILURE:
            logger.error(f"Error fetching players from database: {result.error}")
            content = responses.render_list_players_failure(result.error)
        else:
            logger.warning("List players timed out")
            content = responses.LIST_PLAYERS_TIMEOUT_MESSAGE

        return CommandResponse(
            command=command, outcome=result.outcome, content=content, error_kind=result.error_kind
        )

    async def _race(self, command: str, call: Awaitable) -> ExecutionResult:
        """Race a tracking service call against the command deadline.

        The call is never cancelled: on timeout it is left running and
        tracked as abandoned.
        """
        task = asyncio.ensure_future(call)
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeouts[command])
        except asyncio.CancelledError:
            self._abandon(command, task)
            raise

        if task not in done:
            self._abandon(command, task)
            return ExecutionResult.timeout()

        if task.cancelled():
            error = asyncio.CancelledError(f"{command} call was cancelled")
            return ExecutionResult.failure(error, ErrorKind.UPSTREAM_FAILURE)

        error = task.exception()
        if error is not None:
            return ExecutionResult.failure(error, classify_error(error))
        return ExecutionResult.success(task.result())

    def _abandon(self, command: str, task: asyncio.Future) -> None:
        self._abandoned.add(task)

        def _on_done(finished: asyncio.Future) -> None:
            self._abandoned.discard(finished)
            if finished.cancelled():
                logger.info(f"Abandoned {command} call was cancelled")
            elif finished.exception() is not None:
                logger.warning(f"Abandoned {command} call failed after its deadline: {finished.exception()}")
            else:
                logger.info(f"Abandoned {command} call completed after its deadline")

        task.add_done_callback(_on_done)
