"""
buildflow — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do buildflow.

Objetivo:
- Expressar violações estruturais (registro, grafo, agendamento) com tipos próprios
- Encapsular falhas de tasks e hooks sem perder a exceção original
- Facilitar o mapeamento determinístico para ErrorPayload

Regras:
- Exceções estruturais são levantadas ANTES de qualquer task executar.
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- A mensagem é curta e humana.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class BuildflowError(Exception):
    """Base class para exceções do buildflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Definição / Registro
# ---------------------------------------------------------------------------

class TaskDefinitionError(BuildflowError, ValueError):
    """Definição de task inválida (nome vazio, duas formas de ação, etc.)."""


class DuplicateTaskError(BuildflowError, ValueError):
    """Já existe uma task registrada com o mesmo nome."""

    def __init__(self, task_name: str):
        super().__init__(
            f"Duplicate task name: {task_name}",
            details={"task": task_name},
            hint="Renomeie uma das tasks; nomes são únicos e case-sensitive.",
        )
        self.task_name = task_name


class UnknownTaskError(BuildflowError, LookupError):
    """Nenhuma task registrada com o nome solicitado."""

    def __init__(self, task_name: str):
        super().__init__(
            f"Unknown task: {task_name}",
            details={"task": task_name},
            hint="Verifique o nome do target (nomes de task são case-sensitive).",
        )
        self.task_name = task_name


class RegistryFrozenError(BuildflowError, RuntimeError):
    """O registry já foi congelado (grafo construído) e não aceita novas tasks."""

    def __init__(self, task_name: str):
        super().__init__(
            f"Task registry is frozen; cannot register '{task_name}'",
            details={"task": task_name},
            hint="Defina todas as tasks antes de executar um target.",
        )
        self.task_name = task_name


# ---------------------------------------------------------------------------
# Grafo de dependências
# ---------------------------------------------------------------------------

class UnknownDependencyError(BuildflowError, ValueError):
    """Uma task declarou dependência (ou dependee) que não está registrada."""

    def __init__(self, task_name: str, missing: str):
        super().__init__(
            f"Task '{task_name}' depends on unknown task '{missing}'",
            details={"task": task_name, "missing": missing},
            hint="Registre a dependência ausente ou remova-a de `depends_on`.",
        )
        self.task_name = task_name
        self.missing = missing


class CyclicDependencyError(BuildflowError, ValueError):
    """O grafo de dependências contém um ciclo.

    `cycle` lista as tasks do primeiro ciclo fechado encontrado, na ordem
    de travessia, começando pela task onde a aresta de retorno aterrissa.
    """

    def __init__(self, cycle: Sequence[str]):
        self.cycle: List[str] = list(cycle)
        path = " -> ".join(self.cycle + self.cycle[:1])
        super().__init__(
            f"Cycle detected in task dependency graph: {path}",
            details={"cycle": list(self.cycle)},
            hint="Remova uma das dependências do ciclo.",
        )


# ---------------------------------------------------------------------------
# Execução
# ---------------------------------------------------------------------------

class TaskExecutionError(BuildflowError):
    """Falha de uma task (ação, for-each, task setup/teardown) encapsulada.

    `item_index` só é preenchido para tasks for-each, indicando o elemento
    em que a falha ocorreu.
    """

    def __init__(
        self,
        task_name: str,
        cause: BaseException,
        *,
        item_index: Optional[int] = None,
        item: Any = None,
        stage: str = "action",
    ):
        where = f" on item {item_index}" if item_index is not None else ""
        reason = str(cause) or cause.__class__.__name__
        super().__init__(
            f"Task '{task_name}' failed{where}: {reason}",
            details={
                "task": task_name,
                "stage": stage,
                "item_index": item_index,
                "exception_class": cause.__class__.__name__,
            },
        )
        self.task_name = task_name
        self.cause = cause
        self.item_index = item_index
        self.item = item
        self.stage = stage


class HookExecutionError(BuildflowError):
    """Falha em um hook de run (setup/teardown global)."""

    def __init__(self, hook: str, cause: BaseException):
        reason = str(cause) or cause.__class__.__name__
        super().__init__(
            f"Hook '{hook}' failed: {reason}",
            details={"hook": hook, "exception_class": cause.__class__.__name__},
        )
        self.hook = hook
        self.cause = cause
