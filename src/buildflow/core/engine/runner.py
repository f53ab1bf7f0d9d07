# src/buildflow/core/engine/runner.py
"""
BuildRunner — superfície de definição e invocação do buildflow.

Reúne Registry → Graph Builder → Scheduler → Engine atrás de duas operações:

    runner = BuildRunner()
    runner.define_task("Clean", action=clean)
    runner.define_task("Build", depends_on=["Clean"], action=build)
    result = runner.execute("Build")

Ciclo de vida de uma invocação (`runner.state`):
    IDLE → GRAPH_BUILT → SCHEDULED → RUNNING → {COMPLETED, ABORTED}

Erros estruturais (DuplicateTaskError, UnknownTaskError,
UnknownDependencyError, CyclicDependencyError) são levantados por
`execute` antes de qualquer ação executar; falhas de tasks nunca são
levantadas, ficam no RunResult.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from buildflow import __version__
from buildflow.core.config import compute_config_hash, default_target
from buildflow.core.pipeline.registry import TaskRegistry
from buildflow.core.pipeline.task import Task, make_task
from buildflow.core.pipeline.types import RunState
from buildflow.core.run_context import RunContext
from buildflow.core.traceability.run_log import RunLog, create_run_log

from .engine import Engine, Hooks, RunResult
from .graph import DependencyGraph, build_graph
from .scheduler import resolve


class BuildRunner:
    """Registro de tasks + hooks, com `execute(target)` como ponto de entrada."""

    def __init__(
        self,
        ctx: Optional[RunContext] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if ctx is None:
            ctx = RunContext.from_environment(config=config or {})
        elif config is not None:
            raise ValueError("Pass `config` either directly or inside `ctx`, not both")
        self.ctx = ctx
        self.registry = TaskRegistry()
        self.state = RunState.IDLE
        self.last_run_log: Optional[RunLog] = None
        self._clock = clock
        self._setup: Optional[Callable[[RunContext], Any]] = None
        self._teardown: Optional[Callable[[RunContext], Any]] = None
        self._task_setup: Optional[Callable[[RunContext, Task], Any]] = None
        self._task_teardown: Optional[Callable[[RunContext, Task], Any]] = None

    # ------------------------------------------------------------------
    # Definição
    # ------------------------------------------------------------------

    def define_task(self, name: str, **options: Any) -> Task:
        """Define e registra uma task (ver `make_task` para as opções)."""
        return self.registry.register(make_task(name, **options))

    def task(self, name: Optional[str] = None, **options: Any) -> Callable[[Callable], Callable]:
        """Forma decorator de `define_task`.

        Sem `items`, a função decorada é a ação (`fn(ctx)`); com `items`,
        vira a ação for-each (`fn(ctx, item)`). O nome padrão é o nome da
        função.
        """

        def decorator(fn: Callable) -> Callable:
            key = "for_each" if options.get("items") is not None else "action"
            self.define_task(name or fn.__name__, **{key: fn}, **options)
            return fn

        return decorator

    def setup(self, fn: Callable[[RunContext], Any]) -> Callable[[RunContext], Any]:
        self._setup = fn
        return fn

    def teardown(self, fn: Callable[[RunContext], Any]) -> Callable[[RunContext], Any]:
        self._teardown = fn
        return fn

    def task_setup(self, fn: Callable[[RunContext, Task], Any]) -> Callable[[RunContext, Task], Any]:
        self._task_setup = fn
        return fn

    def task_teardown(self, fn: Callable[[RunContext, Task], Any]) -> Callable[[RunContext, Task], Any]:
        self._task_teardown = fn
        return fn

    @property
    def hooks(self) -> Hooks:
        return Hooks(
            setup=self._setup,
            teardown=self._teardown,
            task_setup=self._task_setup,
            task_teardown=self._task_teardown,
        )

    # ------------------------------------------------------------------
    # Planejamento
    # ------------------------------------------------------------------

    def build_graph(self) -> DependencyGraph:
        return build_graph(self.registry)

    def plan(self, target: Optional[str] = None, *, exclusive: bool = False) -> List[Task]:
        """Ordem de execução de `target`, sem executar nada."""
        target = target or default_target(dict(self.ctx.config))
        return resolve(self.build_graph(), target, exclusive=exclusive)

    # ------------------------------------------------------------------
    # Invocação
    # ------------------------------------------------------------------

    def execute(
        self,
        target: Optional[str] = None,
        *,
        exclusive: bool = False,
        run_id: Optional[str] = None,
    ) -> RunResult:
        """
        Executa `target` e suas dependências transitivas.

        Args:
            target: nome da task; padrão `engine.default_target` ou "Default".
            exclusive: executa apenas o target, sem dependências.
            run_id: identificador da run (gerado quando omitido).

        Returns:
            RunResult: status de cada task tentada e resultado agregado.

        Raises:
            UnknownTaskError, UnknownDependencyError, CyclicDependencyError:
                antes de qualquer task executar.
        """
        config = dict(self.ctx.config)
        target = target or default_target(config)

        self.state = RunState.IDLE
        graph = build_graph(self.registry)
        self.state = RunState.GRAPH_BUILT

        ordered = resolve(graph, target, exclusive=exclusive)
        self.state = RunState.SCHEDULED

        now = self._clock() if self._clock is not None else datetime.now(timezone.utc)
        run_log = create_run_log(
            run_id=run_id or uuid.uuid4().hex,
            target=target,
            started_at=now,
            buildflow_version=__version__,
            config_hash=compute_config_hash(config),
        )
        self.last_run_log = run_log

        engine = Engine(self.ctx, hooks=self.hooks, run_log=run_log, clock=self._clock)
        self.state = RunState.RUNNING
        result = engine.run(ordered)
        self.state = result.state
        return result
