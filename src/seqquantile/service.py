"""Optional FastAPI service hosting named streaming quantile estimators.

Install with `pip install seqquantile[server]` to enable.
This keeps the core library dependency-light.
"""
from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI, HTTPException, Query
    from pydantic import BaseModel
except Exception as exc:  # noqa: BLE001
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install seqquantile[server]` to use the service."  # noqa: E501
    ) from exc

from .base import QuantileEstimator
from .config import EstimatorConfig
from .errors import InvalidArgument
from .metrics import estimator_metrics
from .registry import build_estimator
from .validation import check_finite


class CreateRequest(BaseModel):
    name: str
    algorithm: str = "p2"
    quantiles: List[float] = [0.5]
    epsilon: Optional[float] = None
    delta: Optional[float] = None
    capacity: Optional[int] = None
    seed: Optional[int] = None


class ObserveRequest(BaseModel):
    values: List[float]


class QuantileResponse(BaseModel):
    name: str
    phi: float
    estimate: Optional[float]
    count: int


@dataclass
class _Slot:
    algorithm: str
    estimator: QuantileEstimator
    # one writer at a time per estimator; distinct estimators never contend
    lock: threading.Lock = field(default_factory=threading.Lock)


def build_app() -> FastAPI:
    app = FastAPI(title="seqquantile service", version="0.1.0")
    slots: Dict[str, _Slot] = {}
    registry_lock = threading.Lock()

    def _get(name: str) -> _Slot:
        with registry_lock:
            slot = slots.get(name)
        if slot is None:
            raise HTTPException(status_code=404, detail=f"unknown estimator {name!r}")
        return slot

    @app.get("/healthz")
    def health() -> dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok"}

    @app.post("/estimators", status_code=201)
    def create(req: CreateRequest) -> dict[str, object]:
        cfg = EstimatorConfig(quantiles=tuple(req.quantiles))
        for attr in ("epsilon", "delta", "capacity", "seed"):
            if getattr(req, attr) is not None:
                setattr(cfg, attr, getattr(req, attr))
        try:
            est = build_estimator(req.algorithm, cfg)
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        with registry_lock:
            if req.name in slots:
                raise HTTPException(status_code=409, detail=f"estimator {req.name!r} already exists")
            slots[req.name] = _Slot(req.algorithm, est)
        return {"name": req.name, "algorithm": req.algorithm}

    @app.get("/estimators")
    def list_estimators() -> dict[str, str]:
        with registry_lock:
            return {name: slot.algorithm for name, slot in slots.items()}

    @app.post("/estimators/{name}/observe")
    def observe(name: str, req: ObserveRequest) -> dict[str, int]:
        slot = _get(name)
        try:
            values = [check_finite(v) for v in req.values]
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        with slot.lock:
            for v in values:
                slot.estimator.update(v)
            return {"observed": len(values), "count": slot.estimator.count}

    @app.get("/estimators/{name}/quantile", response_model=QuantileResponse)
    def quantile(name: str, phi: float = Query(...)) -> QuantileResponse:
        slot = _get(name)
        with slot.lock:
            try:
                value = slot.estimator.query(phi)
            except InvalidArgument as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            count = slot.estimator.count
        return QuantileResponse(name=name, phi=phi, estimate=None if math.isnan(value) else value, count=count)

    @app.get("/metrics")
    def metrics() -> dict[str, object]:
        with registry_lock:
            items = list(slots.items())
        out: dict[str, object] = {}
        for name, slot in items:
            with slot.lock:
                out[name] = estimator_metrics(slot.estimator)
        return out

    return app


__all__ = ["build_app"]
