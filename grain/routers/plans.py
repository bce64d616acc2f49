# grain/routers/plans.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException

from grain.config import Settings, load_settings
from grain.llm.context import build_coach_context, build_onboarding_context
from grain.planner.engine import DEMO_GOALS, Goal, build_plan, plan_to_dict
from grain.planner.snapshot import record_to_snapshot, snapshot_to_record
from grain.storage.snapshots import SnapshotStore, get_snapshot_store
from models import ContextRequest, PlanRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["plans"])


def get_settings() -> Settings:
    return load_settings()


def get_store(settings: Settings = Depends(get_settings)) -> SnapshotStore:
    return get_snapshot_store(settings)


def _goals(req: PlanRequest) -> List[Goal]:
    if req.goals is None:
        return list(DEMO_GOALS)
    return [g.to_goal() for g in req.goals]


@router.post("/plans/compute")
def plans_compute(req: PlanRequest) -> Dict[str, Any]:
    inputs = req.budget.to_input()
    plan = build_plan(inputs, _goals(req))
    return plan_to_dict(plan)


@router.post("/plans/context")
def plans_context(req: ContextRequest) -> Dict[str, Any]:
    inputs = req.budget.to_input()
    if req.mode == "onboarding":
        return {"context": build_onboarding_context(req.profile.to_profile(), inputs)}

    goals = _goals(req)
    plan = build_plan(inputs, goals)
    return {"context": build_coach_context(inputs, plan, goals)}


@router.get("/snapshot")
def snapshot_get(
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    key = settings.snapshot_key
    try:
        raw = store.load(key)
    except Exception as e:
        logger.error("Snapshot load failed for %s: %s", key, e)
        raise HTTPException(status_code=500, detail="Could not read saved snapshot")

    profile, inputs = record_to_snapshot(raw)
    logger.info("Snapshot %s restored (found=%s)", key, raw is not None)
    return {
        "key": key,
        "found": raw is not None,
        "snapshot": snapshot_to_record(profile, inputs),
    }


@router.put("/snapshot")
def snapshot_put(
    record: Dict[str, Any] = Body(...),
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    key = settings.snapshot_key
    profile, inputs = record_to_snapshot(record)
    normalized = snapshot_to_record(profile, inputs)
    try:
        store.save(key, normalized)
    except Exception as e:
        logger.error("Snapshot save failed for %s: %s", key, e)
        raise HTTPException(status_code=500, detail="Could not save snapshot")

    logger.info("Snapshot %s saved", key)
    return {"key": key, "snapshot": normalized}
