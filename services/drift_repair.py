# ============================================================================
# DRIFT REPAIR LOOP
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Service - Background consistency sweep
# PURPOSE: Periodically re-derive embedded arrays from child references
# CREATED: 14 OCT 2026
# ============================================================================
"""
DriftRepairLoop

Multi-document writes are not transactional, so a crash between the child
write and the parent array write leaves the graph out of step. This loop
runs ConsistencyEngine.repair_drift on a fixed interval until stopped.

Usage:
    loop = DriftRepairLoop(engine, interval_sec=300)
    await loop.start()
    ...
    await loop.stop()
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from services.consistency import ConsistencyEngine

logger = logging.getLogger(__name__)


class DriftRepairLoop:
    """Background task calling repair_drift every `interval_sec` seconds."""

    def __init__(self, engine: ConsistencyEngine, interval_sec: float):
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self._engine = engine
        self._interval_sec = interval_sec
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

        self.last_run_at: Optional[datetime] = None
        self.documents_corrected = 0
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            logger.warning("Drift repair loop already running")
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run(), name="drift-repair")

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def run_once(self) -> int:
        corrected = await self._engine.repair_drift()
        self.runs += 1
        self.documents_corrected += corrected
        self.last_run_at = datetime.now(timezone.utc)
        return corrected

    async def _run(self) -> None:
        logger.info(f"Starting drift repair loop (interval={self._interval_sec}s)")

        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval_sec)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Drift repair error: {e}")

        logger.info("Drift repair loop stopped")


__all__ = ["DriftRepairLoop"]
