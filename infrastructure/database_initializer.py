# ============================================================================
# STORE INITIALIZER - INFRASTRUCTURE AS CODE
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Infrastructure - Document store bootstrap orchestrator
# PURPOSE: Create collections and unique indexes, optionally seed and repair
# CREATED: 11 OCT 2026
# ============================================================================
"""
StoreInitializer - bootstrap for the document store.

Steps (each idempotent, safe to run on every startup):
1. ensure_collections  - collections and unique indexes for every entity
2. seed                - development fixtures (only when seeds are named)
3. repair_drift        - re-derive embedded arrays (only when requested)

Usage:
    initializer = StoreInitializer(registry)
    result = await initializer.initialize_all(seeds=["choke_point"])
    result.to_dict()
"""

import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from repositories.registry import RepositoryRegistry
from services.consistency import ConsistencyEngine
from services.seed import seed_database

logger = logging.getLogger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class StepResult:
    """Result of a single initialization step."""
    name: str
    status: str  # 'success', 'failed', 'skipped'
    message: str = ""
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InitializationResult:
    """Complete result of store initialization."""
    backend: str
    timestamp: str
    success: bool
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "timestamp": self.timestamp,
            "success": self.success,
            "steps": [
                {
                    "name": s.name,
                    "status": s.status,
                    "message": s.message,
                    "error": s.error,
                    "details": s.details,
                }
                for s in self.steps
            ],
            "errors": self.errors,
            "summary": {
                "total_steps": len(self.steps),
                "successful": len([s for s in self.steps if s.status == "success"]),
                "failed": len([s for s in self.steps if s.status == "failed"]),
                "skipped": len([s for s in self.steps if s.status == "skipped"]),
            },
        }


# ============================================================================
# STORE INITIALIZER
# ============================================================================

class StoreInitializer:
    """Runs the bootstrap steps against a RepositoryRegistry."""

    def __init__(self, registry: RepositoryRegistry):
        self.registry = registry

    async def initialize_all(
        self,
        seeds: Sequence[str] = (),
        repair: bool = False,
    ) -> InitializationResult:
        result = InitializationResult(
            backend=type(self.registry.store).__name__,
            timestamp=datetime.now(timezone.utc).isoformat(),
            success=False,
        )

        logger.info("=" * 70)
        logger.info("INDOOR MAP SERVICE - STORE INITIALIZATION")
        logger.info(f"   Backend: {result.backend}")
        logger.info(f"   Seeds: {list(seeds) or 'none'}  Repair: {repair}")
        logger.info("=" * 70)

        step = await self._ensure_collections()
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Collection bootstrap failed: {step.error}")
            return result

        step = await self._seed(seeds)
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Seeding failed: {step.error}")

        step = await self._repair(repair)
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Drift repair failed: {step.error}")

        result.success = not result.errors
        summary = result.to_dict()["summary"]
        logger.info(
            f"INITIALIZATION {'COMPLETE' if result.success else 'FAILED'}: "
            f"{summary['successful']} succeeded, {summary['failed']} failed, "
            f"{summary['skipped']} skipped"
        )
        return result

    async def _ensure_collections(self) -> StepResult:
        step = StepResult(name="ensure_collections", status="pending")
        try:
            await self.registry.ensure_collections()
            step.status = "success"
            step.message = "Collections and unique indexes ready"
        except Exception as e:
            logger.error(f"Collection bootstrap failed: {e}")
            logger.error(traceback.format_exc())
            step.status = "failed"
            step.error = str(e)
        return step

    async def _seed(self, seeds: Sequence[str]) -> StepResult:
        step = StepResult(name="seed", status="pending")
        if not seeds:
            step.status = "skipped"
            step.message = "No seeds requested"
            return step
        try:
            step.details = await seed_database(self.registry, seeds)
            step.status = "success"
            step.message = f"Seeded {', '.join(step.details)}"
        except Exception as e:
            logger.error(f"Seeding failed: {e}")
            step.status = "failed"
            step.error = str(e)
        return step

    async def _repair(self, repair: bool) -> StepResult:
        step = StepResult(name="repair_drift", status="pending")
        if not repair:
            step.status = "skipped"
            step.message = "Drift repair not requested"
            return step
        try:
            corrected = await ConsistencyEngine(self.registry).repair_drift()
            step.status = "success"
            step.message = f"Corrected {corrected} document(s)"
            step.details = {"corrected": corrected}
        except Exception as e:
            logger.error(f"Drift repair failed: {e}")
            step.status = "failed"
            step.error = str(e)
        return step


__all__ = ["StoreInitializer", "InitializationResult", "StepResult"]
