"""
Tests for the polling file watcher.

Every rewrite in these tests changes the file size, so a change is
visible even where the filesystem has coarse modification times.
"""

import asyncio
import logging

from toml_tree import Table, TomlSyntaxError, TomlWatcher, WatchConfig


FAST = WatchConfig(poll_interval=0.01)


def test_unchanged_file_is_not_reloaded(write_toml) -> None:
    watcher = TomlWatcher(write_toml("a = 1\n"))

    async def scenario() -> list:
        return [await watcher.check() for _ in range(3)]

    assert asyncio.run(scenario()) == [None, None, None]
    assert watcher.last_value is None


def test_change_is_reloaded_after_it_settles(write_toml) -> None:
    """A change is reported on the second poll that sees the same file."""
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)

    async def scenario() -> list:
        path.write_text("a = 22\n")
        return [await watcher.check(), await watcher.check(), await watcher.check()]

    first, second, third = asyncio.run(scenario())

    assert first is None
    assert second.to_structured() == {"a": 22}
    assert third is None
    assert watcher.last_value is second


def test_change_in_progress_postpones_reload(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)

    async def scenario() -> list:
        results = []
        path.write_text("a = 22\n")
        results.append(await watcher.check())
        path.write_text("a = 333\n")
        results.append(await watcher.check())
        results.append(await watcher.check())
        return results

    results = asyncio.run(scenario())

    assert results[:2] == [None, None]
    assert results[2].to_structured() == {"a": 333}


def test_parse_failure_is_kept_not_delivered(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)
    delivered = []
    watcher.subscribe(delivered.append)

    async def poll_twice() -> Table | None:
        await watcher.check()
        return await watcher.check()

    path.write_text("a = [1 2]\n")
    assert asyncio.run(poll_twice()) is None
    assert isinstance(watcher.last_error, TomlSyntaxError)
    assert watcher.last_value is None
    assert delivered == []

    path.write_text("a = [1, 2]\n")
    root = asyncio.run(poll_twice())
    assert root.to_structured() == {"a": [1, 2]}
    assert watcher.last_error is None
    assert delivered == [root]


def test_removed_file_is_not_reloaded(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)

    async def poll_twice() -> Table | None:
        await watcher.check()
        return await watcher.check()

    path.unlink()
    assert asyncio.run(poll_twice()) is None
    assert watcher.last_error is None

    path.write_text("b = 2\n")
    assert asyncio.run(poll_twice()).to_structured() == {"b": 2}


def test_failing_subscriber_does_not_stop_others(write_toml, caplog) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)
    delivered = []

    def broken(root: Table) -> None:
        raise RuntimeError("boom")

    watcher.subscribe(broken)
    watcher.subscribe(delivered.append)

    async def scenario() -> Table | None:
        path.write_text("a = 22\n")
        await watcher.check()
        return await watcher.check()

    with caplog.at_level(logging.ERROR, logger="toml_tree"):
        root = asyncio.run(scenario())

    assert delivered == [root]
    assert "boom" in caplog.text


def test_unsubscribe(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)
    delivered = []
    watcher.subscribe(delivered.append)
    watcher.unsubscribe(delivered.append)
    watcher.unsubscribe(delivered.append)

    async def scenario() -> Table | None:
        path.write_text("a = 22\n")
        await watcher.check()
        return await watcher.check()

    assert asyncio.run(scenario()) is not None
    assert delivered == []


def test_start_and_stop(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path, FAST)

    async def scenario() -> None:
        received = asyncio.Event()
        watcher.subscribe(lambda root: received.set())

        watcher.start()
        assert watcher.watching
        path.write_text("a = 22\n")

        await asyncio.wait_for(received.wait(), timeout=5)
        await watcher.stop()

    asyncio.run(scenario())

    assert not watcher.watching
    assert watcher.last_value.to_structured() == {"a": 22}


def test_stop_without_start(write_toml) -> None:
    watcher = TomlWatcher(write_toml("a = 1\n"))

    asyncio.run(watcher.stop())

    assert not watcher.watching


def test_run_forever_yields_reloaded_documents(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path, FAST)

    async def scenario() -> Table:
        stream = watcher.run_forever()
        path.write_text("a = 22\n")
        try:
            return await asyncio.wait_for(anext(stream), timeout=5)
        finally:
            await stream.aclose()

    assert asyncio.run(scenario()).to_structured() == {"a": 22}


def test_repr(write_toml) -> None:
    path = write_toml("a = 1\n")
    watcher = TomlWatcher(path)

    assert repr(watcher) == f"TomlWatcher({str(path)!r}, idle, 1.0s)"
