# src/propflow/core/traceability/trace.py
"""
RunTrace — Event Log estruturado de uma run do pipeline.

O RunTrace é o mecanismo de observabilidade do PropFlow: em vez de
logging global, cada run pode carregar um registro explícito e ordenado
de eventos, isolado por execução.

Eventos canônicos (v1):
    - run_started    (initial_keys, steps)
    - step_started   (index, step_id, mode)
    - step_finished  (index, step_id, duration_ms[, keys])
    - step_failed    (index, step_id, duration_ms, exc_type, exc_message)
    - run_finished   (duration_ms, final_keys)

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - A ordem de `events` reflete a ordem real de execução
    - Registrar um evento nunca altera o resultado ou a falha de uma run

Limites explícitos:
    - Não persiste em disco
    - Não captura nem transforma exceções
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from propflow.core.pipeline.types import sorted_keys

RUN_STARTED = "run_started"
RUN_FINISHED = "run_finished"
STEP_STARTED = "step_started"
STEP_FINISHED = "step_finished"
STEP_FAILED = "step_failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ms_between(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds() * 1000))


@dataclass
class RunTrace:
    """
    Event Log de uma run.

    Campos:
    - run_id: identificador da execução
    - created_at: timestamp UTC de criação
    - config_hash: hash da configuração efetiva (quando houver)
    - events: eventos ordenados
    - steps: último estado conhecido por índice de Step
    """

    run_id: str
    created_at: datetime
    config_hash: Optional[str] = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    steps: Dict[int, Dict[str, Any]] = field(default_factory=dict)

    _started: Dict[int, datetime] = field(default_factory=dict, init=False, repr=False)
    _run_started: Optional[datetime] = field(default=None, init=False, repr=False)

    def add_event(self, event: str, **payload: Any) -> Dict[str, Any]:
        ev = {
            "run_id": self.run_id,
            "event": event,
            "timestamp": _utcnow().isoformat(),
        }
        ev.update(payload)
        self.events.append(ev)
        return ev

    # -----------------------------
    # Run
    # -----------------------------
    def run_started(self, *, initial_keys: Iterable[str], step_ids: Iterable[str]) -> None:
        self._run_started = _utcnow()
        self.add_event(RUN_STARTED, initial_keys=sorted_keys(initial_keys), steps=list(step_ids))

    def run_finished(self, *, final_keys: Iterable[str]) -> None:
        start = self._run_started or self.created_at
        self.add_event(
            RUN_FINISHED,
            duration_ms=_ms_between(start, _utcnow()),
            final_keys=sorted_keys(final_keys),
        )

    # -----------------------------
    # Steps
    # -----------------------------
    def step_started(self, *, index: int, step_id: str, mode: str) -> None:
        self._started[index] = _utcnow()
        self.steps[index] = {"step_id": step_id, "status": "running", "mode": mode}
        self.add_event(STEP_STARTED, index=index, step_id=step_id, mode=mode)

    def step_finished(self, *, index: int, step_id: str, keys: Optional[Iterable[str]] = None) -> None:
        duration = _ms_between(self._started.get(index, self.created_at), _utcnow())
        self.steps[index] = {**self.steps.get(index, {}), "status": "success", "duration_ms": duration}
        extra: Dict[str, Any] = {}
        if keys is not None:
            extra["keys"] = sorted_keys(keys)
        self.add_event(STEP_FINISHED, index=index, step_id=step_id, duration_ms=duration, **extra)

    def step_failed(self, *, index: int, step_id: str, exc: BaseException) -> None:
        duration = _ms_between(self._started.get(index, self.created_at), _utcnow())
        self.steps[index] = {**self.steps.get(index, {}), "status": "failed", "duration_ms": duration}
        self.add_event(
            STEP_FAILED,
            index=index,
            step_id=step_id,
            duration_ms=duration,
            exc_type=exc.__class__.__name__,
            exc_message=str(exc),
        )

    def event_names(self) -> List[str]:
        return [e["event"] for e in self.events]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "created_at": self.created_at.isoformat(),
            "config_hash": self.config_hash,
            "steps": {str(i): dict(s) for i, s in self.steps.items()},
            "events": [dict(e) for e in self.events],
        }


def create_trace(
    *,
    run_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
    config_hash: Optional[str] = None,
) -> RunTrace:
    """Cria um RunTrace vazio (run_id aleatório e timestamp UTC por padrão)."""
    ts = created_at or _utcnow()
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return RunTrace(
        run_id=run_id or uuid.uuid4().hex,
        created_at=ts.astimezone(timezone.utc),
        config_hash=config_hash,
    )
