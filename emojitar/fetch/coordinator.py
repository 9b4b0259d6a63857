"""Concurrent fetch and tar assembly.

Every reference gets its own task, all started at once. Each successful
payload is turned into a tar file record as soon as it arrives and appended
to the shared ``BuildState``; the build finalizes once, when every reference
has completed. All mutation happens on the event loop thread, one callback at
a time, so the state needs no lock.

Failure policies:

- ``abandon``: a failed fetch is logged and forgotten. The build can then
  never complete and waits until ``deadline`` (forever if None).
- ``raise``: once nothing is pending, any failure raises ``FetchFailed``.
- ``skip``: once nothing is pending, finalize with what arrived.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from emojitar.errors import BuildTimedOut, FetchFailed
from emojitar.fetch.base import PayloadFetcher
from emojitar.models.archive import BuildState, FetchResult, FetchStatus
from emojitar.models.config import FailurePolicy, OrderMode
from emojitar.models.emoji import EmojiRef
from emojitar.tar.encoder import TarEncoder

logger = logging.getLogger(__name__)


class FetchCoordinator:
    """Fetches every reference concurrently and feeds the tar encoder."""

    def __init__(
        self,
        fetcher: PayloadFetcher,
        encoder: TarEncoder | None = None,
        *,
        order: OrderMode = "completion",
        on_failure: FailurePolicy = "abandon",
        deadline: float | None = None,
    ) -> None:
        if order not in ("completion", "reference"):
            raise ValueError(f"Unknown order: {order}")
        if on_failure not in ("abandon", "raise", "skip"):
            raise ValueError(f"Unknown failure policy: {on_failure}")
        self.fetcher = fetcher
        self.encoder = encoder or TarEncoder()
        self.order = order
        self.on_failure = on_failure
        self.deadline = deadline

    async def collect(
        self,
        refs: Sequence[EmojiRef],
        file_paths: Sequence[str],
        state: BuildState,
    ) -> BuildState:
        """Fetch ``refs`` and append their file records to ``state``.

        ``file_paths`` is parallel to ``refs``. A repeated id is fetched once,
        under its first path. Returns ``state`` once it has been finalized.

        Raises:
            FetchFailed: a fetch failed under the ``raise`` policy
            BuildTimedOut: ``deadline`` passed before finalization
        """
        if len(refs) != len(file_paths):
            raise ValueError("refs and file_paths must have the same length")

        build = _Build(self, refs, file_paths, state)
        tasks = [
            asyncio.create_task(build.run(ref), name=f"fetch-{ref.id}")
            for ref in build.refs.values()
        ]
        logger.debug("Launched %d fetches", len(tasks))
        build.check()

        try:
            if self.deadline is None:
                await build.finished
            else:
                try:
                    await asyncio.wait_for(build.finished, self.deadline)
                except asyncio.TimeoutError:
                    outstanding = [
                        ref for rid, ref in build.refs.items()
                        if state.outcomes[rid] != FetchStatus.DONE
                    ]
                    raise BuildTimedOut(self.deadline, outstanding) from None
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        return state


class _Build:
    """Per-call bookkeeping for ``FetchCoordinator.collect``."""

    def __init__(
        self,
        coordinator: FetchCoordinator,
        refs: Sequence[EmojiRef],
        file_paths: Sequence[str],
        state: BuildState,
    ) -> None:
        self.coordinator = coordinator
        self.state = state
        self.refs: dict[str, EmojiRef] = {}
        self.paths: dict[str, str] = {}
        for ref, path in zip(refs, file_paths):
            if ref.id not in self.refs:
                self.refs[ref.id] = ref
                self.paths[ref.id] = path
        self.payloads: dict[str, bytes] = {}
        self.finished: asyncio.Future[BuildState] = asyncio.get_running_loop().create_future()

        state.total = len(self.refs)
        for ref_id in self.refs:
            state.outcomes.setdefault(ref_id, FetchStatus.PENDING)

    async def run(self, ref: EmojiRef) -> None:
        try:
            result = await self.coordinator.fetcher.fetch(ref)
        except Exception as e:
            if not self.finished.done():
                self.finished.set_exception(e)
            raise

        if self.finished.done():
            return
        if result.is_ok:
            self.complete(ref, result.payload)
        else:
            self.fail(ref, result)

    def complete(self, ref: EmojiRef, payload: bytes) -> None:
        if self.state.outcomes.get(ref.id) == FetchStatus.DONE:
            return
        self.state.outcomes[ref.id] = FetchStatus.DONE
        if self.coordinator.order == "completion":
            self.state.chunks.extend(
                self.coordinator.encoder.emit_file_record(self.paths[ref.id], payload)
            )
        else:
            self.payloads[ref.id] = payload
        self.state.completed += 1
        logger.debug("Completed %s (%d/%d)", ref.id, self.state.completed, self.state.total)
        self.check()

    def fail(self, ref: EmojiRef, result: FetchResult) -> None:
        self.state.outcomes[ref.id] = FetchStatus.FAILED
        self.state.failures[ref.id] = result.reason or "unknown"
        if result.cancelled:
            logger.warning("Fetch of %s cancelled: %s", ref.id, result.reason)
        else:
            logger.warning("Fetch of %s abandoned: %s", ref.id, result.reason)

        if self.coordinator.on_failure != "abandon":
            self.check()

    def check(self) -> None:
        """Finalize, or fail the build, when nothing is left to wait for."""
        if self.finished.done():
            return
        if self.state.all_completed:
            self.finalize()
            return
        if self.coordinator.on_failure == "abandon" or self.state.pending:
            return

        if self.coordinator.on_failure == "raise":
            failures = {self.refs[rid]: self.state.failures[rid] for rid in self.state.failed}
            self.finished.set_exception(FetchFailed(failures))
        else:
            self.finalize()

    def finalize(self) -> None:
        if self.state.finalized:
            return
        if self.coordinator.order == "reference":
            for ref_id, path in self.paths.items():
                payload = self.payloads.get(ref_id)
                if payload is not None:
                    self.state.chunks.extend(
                        self.coordinator.encoder.emit_file_record(path, payload)
                    )
        self.state.finalized = True
        logger.info(
            "Finalized build: %d/%d files, %d tar bytes",
            self.state.completed, self.state.total, self.state.size,
        )
        self.finished.set_result(self.state)
