"""Command log store: the durable, append-only record of graph mutations.

INVARIANT: the log is truth. The snapshot is derived and rebuilt on every
invocation; ``graphlog build --compact`` must always be able to rewrite the
log from the snapshot without changing the graph it replays to.

Layout under the store root::

    <root>/<dirname>/commands   # text records, one per line
    <root>/<dirname>/lock       # advisory lock target

Writers take an exclusive lock and readers a shared one. Acquisition polls
until ``lock_timeout`` and then fails with :class:`StoreIOError`.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from collections.abc import Callable, Iterable
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from graphlog.domain.commands import check_command, decode_commands, encode_commands
from graphlog.domain.errors import StoreIOError
from graphlog.domain.graph import build

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graphlog.domain.commands import Command
    from graphlog.domain.graph import Graph

logger = logging.getLogger(__name__)

COMMANDS_FILE = "commands"
LOCK_FILE = "lock"

_POLL_SECONDS = 0.05


# ---------------------------------------------------------------------------
# Advisory locking
# ---------------------------------------------------------------------------


def _try_lock(handle: TextIO, *, exclusive: bool) -> None:
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found,unused-ignore]

        # No shared mode on Windows: lock one byte exclusively
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)  # type: ignore[attr-defined,unused-ignore]
    else:
        import fcntl

        mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(handle.fileno(), mode | fcntl.LOCK_NB)


def _unlock(handle: TextIO) -> None:
    if os.name == "nt":
        import msvcrt  # type: ignore[import-not-found,unused-ignore]

        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)  # type: ignore[attr-defined,unused-ignore]
    else:
        import fcntl

        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


# ---------------------------------------------------------------------------
# CommandLogStore
# ---------------------------------------------------------------------------


class CommandLogStore:
    """File-backed command log with advisory locking.

    ``on_append`` is invoked after every successful write so dependants
    (the lazy snapshot) can drop cached state.
    """

    def __init__(
        self,
        root: Path,
        *,
        dirname: str = ".graph",
        lock_timeout: float = 10.0,
        fsync: bool = True,
        on_append: Callable[[], None] | None = None,
    ) -> None:
        self._dir = root / dirname
        self._lock_timeout = lock_timeout
        self._fsync = fsync
        self._on_append = on_append

    @property
    def directory(self) -> Path:
        return self._dir

    @property
    def commands_path(self) -> Path:
        return self._dir / COMMANDS_FILE

    @property
    def lock_path(self) -> Path:
        return self._dir / LOCK_FILE

    def exists(self) -> bool:
        return self.commands_path.is_file()

    def _require(self) -> None:
        if not self.exists():
            msg = f"No graph store at {self._dir}; run 'graphlog init' first"
            raise StoreIOError(msg, path=str(self._dir))

    # -- locking ---------------------------------------------------------

    @contextmanager
    def locked(self, *, exclusive: bool) -> Iterator[None]:
        """Hold the store lock for the duration of the block."""
        try:
            handle = open(self.lock_path, "a+", encoding="utf-8")  # noqa: SIM115
        except OSError as exc:
            msg = f"Cannot open lock file {self.lock_path}: {exc}"
            raise StoreIOError(msg, path=str(self.lock_path)) from exc

        started = time.monotonic()
        try:
            while True:
                try:
                    _try_lock(handle, exclusive=exclusive)
                    break
                except OSError as exc:
                    waited = time.monotonic() - started
                    if waited > self._lock_timeout:
                        msg = f"Timed out after {waited:.1f}s waiting for the store lock"
                        raise StoreIOError(msg, path=str(self.lock_path)) from exc
                    time.sleep(_POLL_SECONDS)
            try:
                yield
            finally:
                _unlock(handle)
        finally:
            handle.close()

    # -- lifecycle -------------------------------------------------------

    def init(self) -> bool:
        """Create the store directory and an empty log.

        Returns True if anything was created, False if it already existed.
        """
        if self.exists():
            return False
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            self.commands_path.touch()
            self.lock_path.touch()
        except OSError as exc:
            msg = f"Cannot create graph store at {self._dir}: {exc}"
            raise StoreIOError(msg, path=str(self._dir)) from exc
        logger.info("Initialised graph store at %s", self._dir)
        return True

    def clear(self) -> None:
        """Truncate the log to empty."""
        self._require()
        with self.locked(exclusive=True):
            self._write_atomic("")
        self._notify()

    def purge(self) -> None:
        """Delete the whole store directory."""
        if not self._dir.exists():
            return
        try:
            shutil.rmtree(self._dir)
        except OSError as exc:
            msg = f"Cannot remove graph store at {self._dir}: {exc}"
            raise StoreIOError(msg, path=str(self._dir)) from exc
        self._notify()

    # -- writes ----------------------------------------------------------

    def append(self, command: Command) -> None:
        """Durably append a single command."""
        self.append_many([command])

    def append_many(self, commands: Iterable[Command]) -> int:
        """Durably append *commands* in one write. Returns the count written.

        Either the whole batch reaches the file or, on error, the file is
        left as a readable prefix plus at most one truncated record, which
        the next load reports as :class:`LogParseError`.
        """
        batch = list(commands)
        for command in batch:
            check_command(command)
        if not batch:
            return 0
        self._require()
        payload = encode_commands(batch)
        with self.locked(exclusive=True):
            try:
                with open(self.commands_path, "a", encoding="utf-8", newline="\n") as fh:
                    fh.write(payload)
                    fh.flush()
                    if self._fsync:
                        os.fsync(fh.fileno())
            except OSError as exc:
                msg = f"Cannot append to {self.commands_path}: {exc}"
                raise StoreIOError(msg, path=str(self.commands_path)) from exc
        logger.debug("Appended %d command(s) to %s", len(batch), self.commands_path)
        self._notify()
        return len(batch)

    def compact(self) -> tuple[int, int]:
        """Replace the log with the minimal rebuild sequence for its graph.

        Read, replay and rewrite happen under one exclusive hold, so no
        append can land between the load and the rewrite.

        Returns ``(records_before, records_after)``.
        """
        self._require()
        with self.locked(exclusive=True):
            current = self._read()
            before = len(current)
            commands = build(current).as_commands()
            self._write_atomic(encode_commands(commands))
        logger.info("Compacted log: %d -> %d records", before, len(commands))
        self._notify()
        return before, len(commands)

    def _write_atomic(self, text: str) -> None:
        tmp = self.commands_path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(text)
                fh.flush()
                if self._fsync:
                    os.fsync(fh.fileno())
            os.replace(tmp, self.commands_path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            msg = f"Cannot rewrite {self.commands_path}: {exc}"
            raise StoreIOError(msg, path=str(self.commands_path)) from exc

    def _notify(self) -> None:
        if self._on_append is not None:
            self._on_append()

    # -- reads -----------------------------------------------------------

    def _read(self) -> list[Command]:
        try:
            data = self.commands_path.read_bytes()
        except OSError as exc:
            msg = f"Cannot read {self.commands_path}: {exc}"
            raise StoreIOError(msg, path=str(self.commands_path)) from exc
        return decode_commands(data)

    def load(self) -> list[Command]:
        """All commands in append order, under the shared lock."""
        self._require()
        with self.locked(exclusive=False):
            return self._read()

    def snapshot(self) -> Graph:
        """Load and replay under one shared lock hold."""
        self._require()
        with self.locked(exclusive=False):
            commands = self._read()
        graph = build(commands)
        logger.debug(
            "Built snapshot from %d record(s): %d vertices, %d edges",
            len(commands),
            graph.vertex_count,
            graph.edge_count,
        )
        return graph
