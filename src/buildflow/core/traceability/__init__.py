"""
Pacote de rastreabilidade (traceability) do buildflow — Run Log v1.

Responsabilidades principais:
    - Criar e manter o Run Log de uma invocação
    - Registrar eventos explícitos em um Event Log ordenado
    - Atualizar incrementalmente o estado de cada task
    - Persistir e restaurar o Run Log de forma determinística

API pública exposta:
    - RunLog         → estrutura canônica
    - create_run_log → criação explícita
    - add_event      → registro explícito de eventos
    - run_started / run_finished
    - task_started / task_finished / task_failed / task_skipped
    - save_run_log / load_run_log

Limites explícitos:
    - Não executa tasks
    - Não decide políticas de execução
"""

from .run_log import (
    RunLog,
    add_event,
    create_run_log,
    load_run_log,
    run_finished,
    run_started,
    save_run_log,
    task_failed,
    task_finished,
    task_skipped,
    task_started,
)

__all__ = [
    "RunLog",
    "add_event",
    "create_run_log",
    "load_run_log",
    "run_finished",
    "run_started",
    "save_run_log",
    "task_failed",
    "task_finished",
    "task_skipped",
    "task_started",
]
