"""
File watcher that re-parses a TOML document when it changes.

The watcher polls the file's modification time and size. A change is
acted on once it has settled, i.e. the file looked the same on two
consecutive polls; the document is then re-parsed and the new tree is
delivered to subscribers. One polling task per watcher means re-parses
of a path never overlap.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from pathlib import Path

from .const import DEFAULT_POLL_INTERVAL
from .errors import TomlError
from .loader import parse_file_async
from .logging import get_logger
from .models.value import Table


logger = get_logger("watcher")

Signature = tuple[int, int] | None
Subscriber = Callable[[Table], None]

_UNSET = object()


@dataclass
class WatchConfig:
    """Watcher settings."""

    poll_interval: float = DEFAULT_POLL_INTERVAL
    encoding: str | None = None


class TomlWatcher:
    """
    Watch one TOML file and publish re-parsed trees.

    Usage:
        watcher = TomlWatcher("app.toml")
        watcher.subscribe(lambda root: print(root.to_toml()))
        watcher.start()
        ...
        await watcher.stop()

    Parse failures are not delivered; the most recent one is kept on
    last_error until the next successful reload.
    """

    def __init__(self, path: str | Path, config: WatchConfig | None = None):
        self.path = Path(path)
        self.config = config or WatchConfig()

        self.last_value: Table | None = None
        self.last_error: TomlError | None = None

        self._subscribers: list[Subscriber] = []
        self._signature: Signature = self._stat()
        self._candidate: object = _UNSET
        self._task: asyncio.Task | None = None

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callback receiving each re-parsed root table."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        """Remove a previously registered callback."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def watching(self) -> bool:
        return self._task is not None and not self._task.done()

    def _stat(self) -> Signature:
        try:
            stat = self.path.stat()
        except OSError:
            return None
        return (stat.st_mtime_ns, stat.st_size)

    async def check(self) -> Table | None:
        """
        Run one polling step.

        Returns:
            The new root table if a settled change was re-parsed
            successfully, otherwise None
        """
        signature = self._stat()

        if self._candidate is _UNSET:
            if signature != self._signature:
                logger.debug(f"Change detected on {self.path}")
                self._candidate = signature
            return None

        if signature != self._candidate:
            # Still being written
            self._candidate = signature
            return None

        self._candidate = _UNSET
        self._signature = signature

        if signature is None:
            logger.info(f"Watched file removed: {self.path}")
            return None

        return await self._reload()

    async def _reload(self) -> Table | None:
        try:
            root = await parse_file_async(self.path, self.config.encoding)
        except TomlError as e:
            self.last_error = e
            logger.warning(f"Ignoring change to {self.path}: {e}")
            return None

        self.last_error = None
        self.last_value = root
        logger.info(f"Reloaded {self.path}")

        for callback in list(self._subscribers):
            try:
                callback(root)
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed: {e}")

        return root

    async def run_forever(self) -> AsyncIterator[Table]:
        """
        Poll in a loop, yielding each successfully re-parsed root table.

        Yields:
            Root Table after every settled change that parsed
        """
        while True:
            root = await self.check()
            if root is not None:
                yield root

            await asyncio.sleep(self.config.poll_interval)

    async def _run(self) -> None:
        async for _ in self.run_forever():
            pass

    def start(self) -> None:
        """Start polling in a background task. Requires a running event loop."""
        if self.watching:
            return
        logger.info(f"Watching {self.path} (interval: {self.config.poll_interval}s)")
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop polling and wait for the task to finish."""
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

        self._task = None
        logger.info(f"Stopped watching {self.path}")

    def __repr__(self) -> str:
        status = "watching" if self.watching else "idle"
        return f"TomlWatcher({str(self.path)!r}, {status}, {self.config.poll_interval}s)"
