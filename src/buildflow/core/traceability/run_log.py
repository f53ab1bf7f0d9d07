# src/buildflow/core/traceability/run_log.py
"""
Run Log v1 — rastreabilidade de execuções no buildflow.

Este módulo define a estrutura e as operações canônicas do Run Log,
o registro estruturado de uma invocação do engine.

O Run Log consolida, de forma determinística e auditável:
    - metadados da execução (run_id, target, timestamps, versão)
    - hash da configuração efetiva
    - estado incremental de cada task
    - Event Log ordenado de eventos explícitos

Eventos emitidos pelo Engine (nesta ordem relativa):
    run_started → (task_skipped | task_started → task_finished | task_failed)* → run_finished

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de execução
    - O Run Log é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico

Limites explícitos:
    - Não executa tasks
    - Não decide políticas de execução (stop/defer, skip)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Timestamps naive são assumidos como UTC; os demais são convertidos."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    """Duração em milissegundos, nunca negativa."""
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class RunLog:
    """
    Run Log v1 — registro estruturado de uma invocação.

    Campos principais:
        - run: metadados da execução (run_id, target, started_at, finished_at,
          state, completed, buildflow_version)
        - inputs: identidade das entradas (config_hash)
        - tasks: estado incremental de cada task, indexado por nome
        - events: Event Log ordenado

    Invariantes:
        - `tasks` é sempre um dicionário indexado por nome de task
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    tasks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "tasks": {k: dict(v) for k, v in self.tasks.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunLog":
        """Reconstrução permissiva: campos ausentes viram estruturas vazias."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            tasks={k: dict(v) for k, v in (data.get("tasks", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )

    def event_types(self) -> List[str]:
        return [e["event_type"] for e in self.events]


def create_run_log(
    *,
    run_id: str,
    target: str,
    started_at: datetime,
    buildflow_version: str,
    config_hash: str,
) -> RunLog:
    """
    Cria o Run Log inicial de uma invocação.

    ⚠️ Importante: esta função **não emite eventos implicitamente**; o
    Event Log inicia vazio e `run_started` é registrado pelo Engine.
    """
    started_at = _ensure_tzaware_utc(started_at)

    return RunLog(
        run={
            "run_id": run_id,
            "target": target,
            "started_at": _iso(started_at),
            "buildflow_version": buildflow_version,
        },
        inputs={"config_hash": config_hash},
        tasks={},
        events=[],
    )


def add_event(
    run_log: RunLog,
    *,
    event_type: str,
    ts: datetime,
    task: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona exatamente um evento ao Event Log, preservando a ordem de chamada."""
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if task is not None:
        ev["task"] = task
    if payload is not None:
        ev["payload"] = payload
    run_log.events.append(ev)


def run_started(run_log: RunLog, *, ts: datetime, scheduled: List[str]) -> None:
    run_log.run["scheduled"] = list(scheduled)
    add_event(run_log, event_type="run_started", ts=ts, payload={"scheduled": list(scheduled)})


def run_finished(
    run_log: RunLog,
    *,
    ts: datetime,
    state: str,
    completed: bool,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> None:
    run_log.run.update(
        {
            "finished_at": _iso(ts),
            "state": state,
            "completed": completed,
        }
    )
    payload: Dict[str, Any] = {"state": state, "completed": completed}
    if errors:
        run_log.run["errors"] = list(errors)
        payload["errors"] = list(errors)
    add_event(run_log, event_type="run_finished", ts=ts, payload=payload)


def task_started(run_log: RunLog, *, task: str, ts: datetime) -> None:
    """Marca a task como `running` e registra `task_started`."""
    run_log.tasks.setdefault(task, {})
    run_log.tasks[task].update(
        {
            "task": task,
            "status": "running",
            "started_at": _iso(ts),
        }
    )
    add_event(run_log, event_type="task_started", ts=ts, task=task)


def _duration_from_start(entry: Dict[str, Any], ts: datetime) -> int:
    started_iso = entry.get("started_at")
    if not started_iso:
        return 0
    try:
        started_dt = datetime.fromisoformat(started_iso)
    except ValueError:
        return 0
    return _ms_between(started_dt, ts)


def task_finished(run_log: RunLog, *, task: str, ts: datetime, summary: str = "") -> None:
    """Registra conclusão bem-sucedida (`succeeded`) e a duração."""
    entry = run_log.tasks.setdefault(task, {"task": task})
    entry.update(
        {
            "status": "succeeded",
            "finished_at": _iso(ts),
            "duration_ms": _duration_from_start(entry, ts),
            "summary": summary,
        }
    )
    add_event(
        run_log,
        event_type="task_finished",
        ts=ts,
        task=task,
        payload={"status": "succeeded", "duration_ms": entry["duration_ms"]},
    )


def task_failed(run_log: RunLog, *, task: str, ts: datetime, error: Dict[str, Any]) -> None:
    """Registra falha com o ErrorPayload serializado em `error`."""
    entry = run_log.tasks.setdefault(task, {"task": task})
    entry.update(
        {
            "status": "failed",
            "finished_at": _iso(ts),
            "duration_ms": _duration_from_start(entry, ts),
            "error": error,
        }
    )
    add_event(run_log, event_type="task_failed", ts=ts, task=task, payload={"error": error})


def task_skipped(run_log: RunLog, *, task: str, ts: datetime, reason: str) -> None:
    run_log.tasks[task] = {
        "task": task,
        "status": "skipped",
        "finished_at": _iso(ts),
        "duration_ms": 0,
        "summary": reason,
    }
    add_event(run_log, event_type="task_skipped", ts=ts, task=task, payload={"reason": reason})


def save_run_log(run_log: RunLog, path: Path) -> None:
    """
    Persiste o Run Log em JSON (chaves ordenadas, indentado).

    Diretórios intermediários são criados automaticamente.

    Raises:
        OSError: Em caso de falha de escrita.
        TypeError: Se o conteúdo não for serializável em JSON.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(run_log.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_run_log(path: Path) -> RunLog:
    """Restaura um Run Log salvo por `save_run_log`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return RunLog.from_dict(data)
