# src/buildflow/core/pipeline/types.py
"""
Tipos canônicos do pipeline de tasks do buildflow.

Este módulo define as estruturas e enums fundamentais que padronizam
a comunicação entre Registry, Engine e camadas de rastreabilidade.

Componentes principais:
    - TaskStatus  → enum de estados finais (SKIPPED, SUCCEEDED, FAILED)
    - ErrorPolicy → política de erro por task (stop-on-error, defer-on-error)
    - RunState    → estados do ciclo de vida de uma invocação
    - TaskReport  → estrutura imutável de resultado de uma task

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Valores textuais são projetados para persistência no run log
    - Nenhuma lógica de execução vive neste módulo

Limites explícitos:
    - Não executa tasks
    - Não planeja a ordem de execução
    - Não decide políticas de execução
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from buildflow.core.exceptions import TaskExecutionError


class TaskStatus(str, Enum):
    """
    Estados finais possíveis de uma task em uma run.

    Estados definidos:
        - SKIPPED: execução pulada por critério ou configuração
        - SUCCEEDED: ação concluída sem erro
        - FAILED: ação (ou hook da task) levantou erro

    Decisões arquiteturais:
        - O status é um valor final, não transitório
        - Estados intermediários (ex.: running) existem apenas no run log
        - O valor do enum é usado diretamente em persistência e eventos

    Limites explícitos:
        - Não representa tasks que não chegaram a ser tentadas
    """
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ErrorPolicy(str, Enum):
    """
    Política de propagação de erro de uma task.

    - STOP_ON_ERROR (padrão): a falha interrompe a run; nenhuma task
      posterior na ordem é tentada.
    - DEFER_ON_ERROR: a falha é registrada e a run continua; o resultado
      final ainda é reportado como falho.
    """
    STOP_ON_ERROR = "stop-on-error"
    DEFER_ON_ERROR = "defer-on-error"

    @classmethod
    def parse(cls, value: Any) -> "ErrorPolicy":
        """Aceita o enum, seu valor textual ou o nome (`defer_on_error`)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for policy in cls:
                if policy.value == normalized:
                    return policy
        raise ValueError(f"Invalid error policy: {value!r}")


class RunState(str, Enum):
    """
    Estados de uma invocação do engine.

    Transições válidas:
        IDLE → GRAPH_BUILT → SCHEDULED → RUNNING → {COMPLETED, ABORTED}

    ABORTED só é alcançado após falha de uma task stop-on-error (ou falha
    do hook de setup). COMPLETED significa que todas as tasks agendadas
    foram tentadas, independentemente de falhas diferidas.
    """
    IDLE = "idle"
    GRAPH_BUILT = "graph_built"
    SCHEDULED = "scheduled"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class TaskReport:
    """
    Resultado imutável de uma task em uma run.

    Campos:
        - task_name: nome da task
        - status: estado final (`TaskStatus`)
        - summary: resumo textual (ex.: motivo do skip)
        - error: `TaskExecutionError` capturado, quando FAILED
        - duration_ms: duração da tentativa (0 para SKIPPED)
    """
    task_name: str
    status: TaskStatus
    summary: str = ""
    error: Optional[TaskExecutionError] = None
    duration_ms: int = 0

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task": self.task_name,
            "status": self.status.value,
            "summary": self.summary,
            "error": self.error.message if self.error is not None else None,
            "duration_ms": self.duration_ms,
        }
