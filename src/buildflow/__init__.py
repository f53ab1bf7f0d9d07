# src/buildflow/__init__.py
"""
buildflow — engine declarativo de orquestração de tasks de build.

Tasks nomeadas declaram dependências, critérios de execução e política de
erro; o engine executa um target e todas as suas dependências transitivas
em ordem correta, uma task por vez.

Arquitetura em alto nível:
    - core.pipeline     → Task, TaskRegistry, tipos de status e política
    - core.engine       → grafo, scheduler, engine e BuildRunner
    - core.run_context  → consultas de ambiente (CI, SO, pull request)
    - core.config       → configuração YAML/JSON com deep-merge
    - core.traceability → Run Log da invocação
    - report            → listagem de tasks e resumo da run em Markdown

Limites explícitos:
    - Não executa build/test/pack/publish por conta própria
    - Não faz parsing de argumentos nem manipula credenciais
    - Não executa tasks em paralelo ou de forma distribuída
"""

__version__ = "0.1.0"

from buildflow.core.engine import BuildRunner, Engine, Hooks, RunResult, build_graph, resolve
from buildflow.core.exceptions import (
    BuildflowError,
    CyclicDependencyError,
    DuplicateTaskError,
    HookExecutionError,
    RegistryFrozenError,
    TaskDefinitionError,
    TaskExecutionError,
    UnknownDependencyError,
    UnknownTaskError,
)
from buildflow.core.pipeline.registry import TaskRegistry
from buildflow.core.pipeline.task import Criterion, ForEachAction, SingleAction, Task, make_task
from buildflow.core.pipeline.types import ErrorPolicy, RunState, TaskReport, TaskStatus
from buildflow.core.run_context import RunContext

__all__ = [
    "__version__",
    "BuildRunner",
    "Engine",
    "Hooks",
    "RunResult",
    "build_graph",
    "resolve",
    "BuildflowError",
    "CyclicDependencyError",
    "DuplicateTaskError",
    "HookExecutionError",
    "RegistryFrozenError",
    "TaskDefinitionError",
    "TaskExecutionError",
    "UnknownDependencyError",
    "UnknownTaskError",
    "TaskRegistry",
    "Criterion",
    "ForEachAction",
    "SingleAction",
    "Task",
    "make_task",
    "ErrorPolicy",
    "RunState",
    "TaskReport",
    "TaskStatus",
    "RunContext",
]
