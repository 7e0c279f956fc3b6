"""Directory-based lock for cross-process mutual exclusion.

Any number of processes may contend for the same lock path. Creating the
lock directory is the atomic acquire; its existence is the only record of
ownership. While held, a heartbeat task keeps the directory's mtime fresh so
other waiters can tell a live holder from an abandoned one.

Example:
    lock = Lock("/tmp/build/lock", poll_interval=0.01)
    async with lock.held():
        await rebuild()
"""

import asyncio
import contextlib
import errno
import inspect
import logging
import stat
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from ..constants import MAX_CREATE_FAILURES
from ..errors import LockInternalError, LockStateError, StaleLockError
from ..models import LockState, LockTiming
from .filesystem import FileSystem, LocalFileSystem

T = TypeVar("T")

StaleHandler = Callable[[Path], Awaitable[None] | None]


def raise_stale(path: Path) -> None:
    """Default on_stale handler: fail acquisition with StaleLockError."""
    raise StaleLockError(path)


async def run_uncancellable(aw: Awaitable[T]) -> T:
    """Run aw to completion even if the calling task is cancelled.

    The work runs in its own task, so neither a cancel() nor a caller deadline
    can abandon it halfway. A cancellation received while waiting is
    re-raised once the work has finished.
    """
    task = asyncio.ensure_future(aw)
    cancelled = False
    while not task.done():
        try:
            await asyncio.wait((task,))
        except asyncio.CancelledError:
            cancelled = True
    if cancelled:
        # Retrieve the outcome so a failure is not reported as never retrieved
        error = None if task.cancelled() else task.exception()
        raise asyncio.CancelledError from error
    return task.result()


class Lock:
    """A filesystem lock identified by a directory path.

    Constructing a Lock has no side effects. Each take/release cycle creates
    and removes the lock directory; the instance can be reused once released
    but never while a cycle is in progress.

    Args:
        path: Lock directory. Every process naming the same path contends
            for the same lock.
        timing: Interval configuration. Mutually exclusive with the
            individual interval keywords.
        poll_interval: Seconds between contention re-checks.
        update_interval: Seconds between heartbeat mtime refreshes.
        stale_duration: Seconds a lock's mtime must stay unchanged before it
            can be declared stale.
        logger: Logger for lock events (defaults to this module's logger).
        filesystem: Filesystem primitives (defaults to the local OS).
        clock: Wall-clock source in seconds (defaults to time.time).
    """

    def __init__(
        self,
        path: Path | str,
        timing: LockTiming | None = None,
        *,
        poll_interval: float | None = None,
        update_interval: float | None = None,
        stale_duration: float | None = None,
        logger: logging.Logger | None = None,
        filesystem: FileSystem | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        intervals = {
            "poll_interval": poll_interval,
            "update_interval": update_interval,
            "stale_duration": stale_duration,
        }
        overrides = {name: value for name, value in intervals.items() if value is not None}
        if timing is None:
            timing = LockTiming(**overrides)
        elif overrides:
            raise ValueError("Pass either timing or interval keywords, not both")

        self.path = Path(path)
        self.timing = timing
        self.logger = logger or logging.getLogger(__name__)
        self.filesystem: FileSystem = filesystem or LocalFileSystem()
        self.clock = clock or time.time
        # Set exactly once per cycle by the heartbeat task, replaced on release
        self.done = asyncio.Event()
        self._state = LockState.CREATED
        self._heartbeat_task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return f"Lock(path={str(self.path)!r}, state={self._state.value})"

    @property
    def state(self) -> LockState:
        return self._state

    @property
    def is_owned(self) -> bool:
        return self._state is LockState.OWNED

    @property
    def poll_interval(self) -> float:
        return self.timing.poll_interval

    @property
    def update_interval(self) -> float:
        return self.timing.update_interval

    @property
    def stale_duration(self) -> float:
        return self.timing.stale_duration

    def _tags(self, **extra: str) -> dict[str, str]:
        return {"path": str(self.path), **extra}

    async def do(
        self, block: Callable[[], Awaitable[T]], on_stale: StaleHandler | None = None
    ) -> T:
        """Run block while holding the lock and return its result.

        Errors raised by block propagate unchanged once the lock has been
        released.

        Raises:
            LockStateError: If this instance is already taking, holding or
                releasing the lock.
            StaleLockError: If the lock is stale and no on_stale handler
                was given.
        """
        async with self.held(on_stale):
            return await block()

    @contextlib.asynccontextmanager
    async def held(self, on_stale: StaleHandler | None = None) -> AsyncIterator["Lock"]:
        """Hold the lock for the duration of an ``async with`` block.

        Release always runs to completion, including when the block raises or
        the surrounding task is cancelled.
        """
        await self.take(on_stale)
        try:
            yield self
        finally:
            await self.release()

    async def take(self, on_stale: StaleHandler | None = None) -> None:
        """Block until the lock directory is created by this process.

        Starts the heartbeat once the lock is owned. Pair every successful
        take() with release(); held() and do() do this for you.

        Args:
            on_stale: Called with the lock path when the current holder looks
                abandoned. Returning means the situation was handled and the
                loop retries; raising aborts acquisition. May be a coroutine
                function. Defaults to raising StaleLockError.

        Raises:
            LockStateError: If this instance is not idle.
            LockInternalError: If mkdir keeps reporting the directory as
                existing while stat never sees it.
            NotADirectoryError: If the lock path is occupied by a file.
            OSError: If creating the directory fails for any other reason.
        """
        if self._state is not LockState.CREATED:
            raise LockStateError(f"Lock {self.path} is already in use ({self._state.value})")
        self._state = LockState.TAKING
        try:
            await self._acquire(on_stale or raise_stale)
        except BaseException:
            self._state = LockState.CREATED
            raise

        self._state = LockState.OWNED
        self._heartbeat_task = asyncio.create_task(
            self._heartbeat(self.done), name=f"dirlock-heartbeat:{self.path}"
        )

    async def _acquire(self, on_stale: StaleHandler) -> None:
        stale_factor = self.timing.stale_factor
        last_mtime: float | None = None
        last_change = self.clock()
        unchanged = 0
        create_failures = 0

        self.logger.debug(f"Taking lock {self.path}", extra=self._tags())
        while True:
            try:
                st = self.filesystem.stat(self.path)
            except FileNotFoundError:
                st = None

            if st is not None and stat.S_ISDIR(st.st_mode):
                create_failures = 0
                if st.st_mtime == last_mtime:
                    unchanged += 1
                else:
                    unchanged = 0
                    last_mtime = st.st_mtime
                    last_change = self.clock()

                # Both conditions: a suspended machine can make elapsed time jump
                # without the holder having had a chance to heartbeat
                elapsed = self.clock() - last_change
                if unchanged >= stale_factor and elapsed > self.stale_duration:
                    self.logger.warning(
                        f"Lock {self.path} unchanged for {elapsed:.3f}s, treating as stale",
                        extra=self._tags(),
                    )
                    result = on_stale(self.path)
                    if inspect.isawaitable(result):
                        await result
                    unchanged = 0
                    continue

                self.logger.debug(f"Lock {self.path} is held, polling", extra=self._tags())
                await asyncio.sleep(self.poll_interval)
                continue

            if st is not None:
                raise NotADirectoryError(
                    errno.ENOTDIR, "Lock path exists and is not a directory", str(self.path)
                )

            self.filesystem.makedirs(self.path.parent)
            try:
                self.filesystem.mkdir(self.path)
            except FileExistsError:
                create_failures += 1
                if create_failures > MAX_CREATE_FAILURES:
                    message = (
                        f"mkdir reported {self.path} as existing {create_failures} times "
                        "but it was never observed"
                    )
                    self.logger.error(message, extra=self._tags())
                    raise LockInternalError(message) from None
                self.logger.debug(f"Lost race creating {self.path}", extra=self._tags())
                continue
            break

        self.logger.info(f"Lock acquired: {self.path}", extra=self._tags())

    async def _heartbeat(self, done: asyncio.Event) -> None:
        """Refresh the lock directory mtime until cancelled or touching fails."""
        try:
            while True:
                await asyncio.sleep(self.update_interval)
                try:
                    self.filesystem.touch(self.path)
                except OSError as e:
                    self.logger.error(
                        f"Heartbeat failed for {self.path}, lock may go stale: {e}",
                        extra=self._tags(error=str(e)),
                    )
                    return
                self.logger.debug(f"Heartbeat: {self.path}", extra=self._tags())
        finally:
            done.set()

    async def release(self) -> None:
        """Stop the heartbeat and remove the lock directory.

        Runs to completion even if the calling task is cancelled; the
        cancellation is re-raised afterwards. Failing to remove the directory
        is logged, never raised, so an error from the protected block is
        what reaches the caller.

        Raises:
            LockStateError: If the lock is not currently owned.
        """
        if self._state is not LockState.OWNED:
            raise LockStateError(f"Lock {self.path} is not owned ({self._state.value})")
        self._state = LockState.RELEASING
        try:
            await run_uncancellable(self._release())
        finally:
            self._state = LockState.CREATED

    async def _release(self) -> None:
        task, self._heartbeat_task = self._heartbeat_task, None
        try:
            if task is not None:
                task.cancel()
                # Wait for the task to actually stop so an in-flight touch
                # cannot race the rmdir below
                await self.done.wait()
            try:
                self.filesystem.rmdir(self.path)
            except FileNotFoundError:
                self.logger.warning(
                    f"Lock {self.path} was already removed before release",
                    extra=self._tags(),
                )
            except OSError as e:
                self.logger.error(
                    f"Failed to remove lock {self.path} on release: {e}",
                    extra=self._tags(error=str(e)),
                )
            else:
                self.logger.info(f"Lock released: {self.path}", extra=self._tags())
        finally:
            self.done = asyncio.Event()
