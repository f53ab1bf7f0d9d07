# src/buildflow/core/engine/engine.py
"""
Engine de execução de tasks do buildflow.

O Engine percorre uma ordem já calculada pelo scheduler e, para cada task:
    1. verifica se a task foi desabilitada por configuração
       (`tasks.<nome>.enabled: false`) → SKIPPED
    2. avalia os critérios contra o RunContext → SKIPPED se algum for falso
       (dependentes continuam executando: não há skip em cascata)
    3. executa task_setup, a ação (uma vez ou uma vez por item), o
       `finally_action` da task e task_teardown
    4. converte qualquer exceção em `TaskExecutionError` e aplica a política:
       - stop-on-error: nenhuma task posterior é tentada (ABORTED)
       - defer-on-error: a run continua; o resultado final segue falho

Hooks de run (`setup` / `teardown`) envolvem todas as tasks: falha no setup
impede qualquer task; teardown roda sempre, e sua falha torna falha uma run
que até então tinha sucesso.

Garantias:
    - Execução estritamente sequencial, uma task por vez
    - Nenhum retry: uma task que falha nunca é re-tentada na mesma run
    - Sem timeout ou cancelamento: ações controlam seus próprios limites
    - O RunContext é apenas lido; o Engine não mantém outro estado compartilhado

Limites explícitos:
    - Não constrói grafo nem calcula ordem
    - Não interpreta o que as ações fazem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from buildflow.core.errors import exception_to_payload, hook_execution_error, task_execution_error
from buildflow.core.exceptions import (
    HookExecutionError,
    TaskExecutionError,
    UnknownTaskError,
)
from buildflow.core.pipeline.task import ForEachAction, Task
from buildflow.core.pipeline.types import ErrorPolicy, RunState, TaskReport, TaskStatus
from buildflow.core.run_context import RunContext
from buildflow.core.traceability import run_log as trace


@dataclass(frozen=True)
class Hooks:
    """Hooks opcionais de run e de task.

    - setup(ctx) / teardown(ctx): uma vez por run
    - task_setup(ctx, task) / task_teardown(ctx, task): em torno de cada
      task que não foi pulada
    """

    setup: Optional[Callable[[RunContext], Any]] = None
    teardown: Optional[Callable[[RunContext], Any]] = None
    task_setup: Optional[Callable[[RunContext, Task], Any]] = None
    task_teardown: Optional[Callable[[RunContext, Task], Any]] = None


@dataclass(frozen=True)
class RunResult:
    """
    Resultado agregado de uma run.

    Campos:
        - completed: True sse todas as tasks agendadas foram tentadas e
          nenhuma falhou (nem hook de run)
        - reports: um TaskReport por task tentada, na ordem de execução
        - state: COMPLETED ou ABORTED
        - not_run: tasks agendadas que não chegaram a ser tentadas
        - hook_errors: falhas de setup/teardown de run
    """

    completed: bool
    reports: Tuple[TaskReport, ...] = ()
    state: RunState = RunState.COMPLETED
    not_run: Tuple[str, ...] = ()
    hook_errors: Tuple[HookExecutionError, ...] = field(default=())

    @property
    def success(self) -> bool:
        return self.completed

    @property
    def failed_tasks(self) -> List[str]:
        return [r.task_name for r in self.reports if r.failed]

    @property
    def errors(self) -> List[TaskExecutionError]:
        return [r.error for r in self.reports if r.error is not None]

    def report_for(self, task_name: str) -> TaskReport:
        for r in self.reports:
            if r.task_name == task_name:
                return r
        raise UnknownTaskError(task_name)

    def statuses(self) -> Dict[str, TaskStatus]:
        return {r.task_name: r.status for r in self.reports}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds() * 1000))


class Engine:
    """Executor sequencial de tasks com política explícita de erro."""

    def __init__(
        self,
        ctx: RunContext,
        *,
        hooks: Optional[Hooks] = None,
        run_log: Optional[trace.RunLog] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.ctx = ctx
        self.hooks = hooks or Hooks()
        self.run_log = run_log
        self._now = clock or _utcnow

    # ------------------------------------------------------------------
    # Configuração
    # ------------------------------------------------------------------

    def _is_enabled(self, task_name: str) -> bool:
        return bool(self.ctx.task_config(task_name).get("enabled", True))

    def _error_policy(self, task: Task) -> ErrorPolicy:
        override = self.ctx.task_config(task.name).get("error_policy")
        if override is None:
            return task.error_policy
        return ErrorPolicy.parse(override)

    # ------------------------------------------------------------------
    # Run log (opcional)
    # ------------------------------------------------------------------

    def _trace(self, fn: Callable[..., None], **kwargs: Any) -> None:
        if self.run_log is not None:
            fn(self.run_log, **kwargs)

    # ------------------------------------------------------------------
    # Invocação protegida
    # ------------------------------------------------------------------

    def _guard(self, task: Task, stage: str, fn: Callable[[], Any]) -> Optional[TaskExecutionError]:
        try:
            fn()
        except Exception as e:
            # erros de outra task também são atribuídos à task corrente
            return TaskExecutionError(task.name, e, stage=stage)
        return None

    def _run_hook(self, hook: str, fn: Optional[Callable[[RunContext], Any]]) -> Optional[HookExecutionError]:
        if fn is None:
            return None
        try:
            fn(self.ctx)
        except Exception as e:
            error = HookExecutionError(hook, e)
            self._trace(
                trace.add_event,
                event_type="hook_failed",
                ts=self._now(),
                payload={"error": hook_execution_error(error).to_dict()},
            )
            return error
        return None

    def _criteria_skip_reason(self, task: Task) -> Optional[str]:
        for criterion in task.criteria:
            if not criterion.evaluate(self.ctx):
                return criterion.reason or "skipped by criteria"
        return None

    def _invoke_action(self, task: Task) -> Optional[TaskExecutionError]:
        action = task.action
        if action is None:
            return None

        if isinstance(action, ForEachAction):
            try:
                items = action.resolve_items(self.ctx)
            except Exception as e:
                return TaskExecutionError(task.name, e, stage="items")
            for index, item in enumerate(items):
                try:
                    action.fn(self.ctx, item)
                except Exception as e:
                    # aborta os itens restantes da mesma task
                    return TaskExecutionError(task.name, e, item_index=index, item=item)
            return None

        return self._guard(task, "action", lambda: action.invoke(self.ctx))

    def _report_error(self, task: Task, error: TaskExecutionError) -> None:
        if task.error_reporter is None:
            return
        try:
            task.error_reporter(error)
        except Exception as e:
            self._trace(
                trace.add_event,
                event_type="error_reporter_failed",
                ts=self._now(),
                task=task.name,
                payload={"error": exception_to_payload(e).to_dict()},
            )

    # ------------------------------------------------------------------
    # Task
    # ------------------------------------------------------------------

    def _skipped(self, task: Task, reason: str) -> TaskReport:
        self._trace(trace.task_skipped, task=task.name, ts=self._now(), reason=reason)
        return TaskReport(task_name=task.name, status=TaskStatus.SKIPPED, summary=reason)

    def _failed(self, task: Task, error: TaskExecutionError, started: datetime) -> TaskReport:
        self._report_error(task, error)
        finished = self._now()
        self._trace(
            trace.task_failed,
            task=task.name,
            ts=finished,
            error=task_execution_error(error).to_dict(),
        )
        return TaskReport(
            task_name=task.name,
            status=TaskStatus.FAILED,
            summary=error.message,
            error=error,
            duration_ms=_elapsed_ms(started, finished),
        )

    def run_task(self, task: Task) -> TaskReport:
        """Executa uma única task e devolve seu TaskReport (nunca levanta)."""
        if not self._is_enabled(task.name):
            return self._skipped(task, "skipped by config")

        started = self._now()
        try:
            reason = self._criteria_skip_reason(task)
        except Exception as e:
            return self._failed(task, TaskExecutionError(task.name, e, stage="criteria"), started)
        if reason is not None:
            return self._skipped(task, reason)

        self._trace(trace.task_started, task=task.name, ts=started)

        error: Optional[TaskExecutionError] = None
        if self.hooks.task_setup is not None:
            error = self._guard(task, "task_setup", lambda: self.hooks.task_setup(self.ctx, task))
        if error is None:
            error = self._invoke_action(task)

        if task.finally_action is not None:
            finally_error = self._guard(task, "finally", lambda: task.finally_action(self.ctx))
            error = error or finally_error

        if self.hooks.task_teardown is not None:
            teardown_error = self._guard(
                task, "task_teardown", lambda: self.hooks.task_teardown(self.ctx, task)
            )
            error = error or teardown_error

        if error is not None:
            return self._failed(task, error, started)

        finished = self._now()
        self._trace(trace.task_finished, task=task.name, ts=finished)
        return TaskReport(
            task_name=task.name,
            status=TaskStatus.SUCCEEDED,
            duration_ms=_elapsed_ms(started, finished),
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, ordered: Sequence[Task]) -> RunResult:
        """
        Executa `ordered` em sequência e consolida o RunResult.

        Nunca levanta por falha de task ou hook: toda falha é capturada
        no TaskReport correspondente (ou em `hook_errors`).
        """
        tasks = list(ordered)
        reports: List[TaskReport] = []
        hook_errors: List[HookExecutionError] = []
        aborted = False

        self._trace(trace.run_started, ts=self._now(), scheduled=[t.name for t in tasks])

        setup_error = self._run_hook("setup", self.hooks.setup)
        if setup_error is not None:
            hook_errors.append(setup_error)
            aborted = True
        else:
            for task in tasks:
                report = self.run_task(task)
                reports.append(report)
                if report.failed and self._error_policy(task) == ErrorPolicy.STOP_ON_ERROR:
                    aborted = True
                    break

        teardown_error = self._run_hook("teardown", self.hooks.teardown)
        if teardown_error is not None:
            hook_errors.append(teardown_error)

        attempted = {r.task_name for r in reports}
        not_run = tuple(t.name for t in tasks if t.name not in attempted)
        state = RunState.ABORTED if aborted else RunState.COMPLETED
        completed = (
            state == RunState.COMPLETED
            and not any(r.failed for r in reports)
            and not hook_errors
        )

        self._trace(
            trace.run_finished,
            ts=self._now(),
            state=state.value,
            completed=completed,
            errors=[hook_execution_error(e).to_dict() for e in hook_errors],
        )

        return RunResult(
            completed=completed,
            reports=tuple(reports),
            state=state,
            not_run=not_run,
            hook_errors=tuple(hook_errors),
        )
