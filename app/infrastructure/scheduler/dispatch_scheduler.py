from __future__ import annotations

import asyncio
import logging

from app.application.use_cases.auto_dispatch import AutoDispatchUseCase


class DispatchScheduler:
    """Runs dispatch ticks on a fixed interval until stopped."""

    def __init__(self, dispatch: AutoDispatchUseCase, interval_seconds: float = 5.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._dispatch = dispatch
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._tick: asyncio.Future[object] | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="auto-dispatch")
        self._logger.info("Dispatch scheduler started", extra={"reason": f"interval={self._interval}s"})

    async def stop(self) -> None:
        """Cancel the loop and wait for a tick already on its worker thread."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        tick = self._tick
        self._tick = None
        if tick is not None and not tick.done():
            try:
                await tick
            except Exception:
                self._logger.exception("Dispatch tick failed")
        self._logger.info("Dispatch scheduler stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            # Ticks take the store lock and write snapshots; keep them off the loop.
            # The thread cannot be cancelled, so the future is shielded and stop() awaits it.
            self._tick = asyncio.ensure_future(asyncio.to_thread(self._dispatch.tick))
            try:
                await asyncio.shield(self._tick)
            except asyncio.CancelledError:
                raise
            except Exception:
                self._logger.exception("Dispatch tick failed")
            self._tick = None
