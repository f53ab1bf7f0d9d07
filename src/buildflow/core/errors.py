"""
buildflow — Canonical Error Structures (v1)

Este módulo define o payload canônico de erro do buildflow.
Toda falha capturada durante uma run (task ou hook) é convertida em um
`ErrorPayload`, que é:

- explícito
- serializável
- rastreável (vai para o run log)
- acionável (traz `hint` quando possível)

Nenhuma decisão implícita é permitida: o payload descreve a falha, não a trata.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .exceptions import BuildflowError, HookExecutionError, TaskExecutionError


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do buildflow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

TASK_EXECUTION_ERROR = "TASK_EXECUTION_ERROR"
HOOK_EXECUTION_ERROR = "HOOK_EXECUTION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def task_execution_error(
    error: TaskExecutionError,
    *,
    hint: str = "Verifique a saída da task; o buildflow não faz retry nem fallback automático.",
) -> ErrorPayload:
    return ErrorPayload(
        type=TASK_EXECUTION_ERROR,
        message=error.message,
        details={
            "task": error.task_name,
            "stage": error.stage,
            "item_index": error.item_index,
            "exc_type": error.cause.__class__.__name__,
            "exc_message": str(error.cause),
        },
        hint=hint,
    )


def hook_execution_error(
    error: HookExecutionError,
    *,
    hint: str = "Hooks de run afetam todas as tasks; corrija o hook antes de reexecutar.",
) -> ErrorPayload:
    return ErrorPayload(
        type=HOOK_EXECUTION_ERROR,
        message=error.message,
        details={
            "hook": error.hook,
            "exc_type": error.cause.__class__.__name__,
            "exc_message": str(error.cause),
        },
        hint=hint,
    )


def exception_to_payload(exc: BaseException) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - TaskExecutionError / HookExecutionError: fábricas dedicadas.
    - BuildflowError: usa o nome da classe como código estável.
    - Outras exceções: encapsula como
      TASK_EXECUTION_ERROR genérico, sem expor stack trace.
    """
    if isinstance(exc, TaskExecutionError):
        return task_execution_error(exc)
    if isinstance(exc, HookExecutionError):
        return hook_execution_error(exc)
    if isinstance(exc, BuildflowError):
        return ErrorPayload(
            type=exc.__class__.__name__,
            message=exc.message,
            details=dict(exc.details),
            hint=exc.hint,
        )
    return ErrorPayload(
        type=TASK_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log técnico da task",
    )
