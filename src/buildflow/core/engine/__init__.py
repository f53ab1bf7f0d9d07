# src/buildflow/core/engine/__init__.py
"""
Engine do buildflow.

Este pacote contém a implementação responsável por **validar**, **agendar**
e **executar** tasks de build.

Componentes principais:
    - graph     → construção e validação do grafo (dependências, ciclos)
    - scheduler → ordem de execução de um target (DFS pós-ordem)
    - engine    → execução sequencial com critérios, hooks e política de erro
    - runner    → superfície `define_task` / `execute`

Princípios fundamentais:
    - Validação, agendamento e execução são responsabilidades separadas
    - A ordem de execução é determinística para o mesmo grafo e target
    - Nenhuma decisão silenciosa é tomada durante a execução

Invariantes:
    - Tasks só executam após todas as suas dependências terem status final
    - Cada task é tentada no máximo uma vez por run
    - O resultado reflete explicitamente o estado de cada task tentada
"""

from .engine import Engine, Hooks, RunResult
from .graph import DependencyGraph, build_graph
from .runner import BuildRunner
from .scheduler import resolve

__all__ = [
    "BuildRunner",
    "DependencyGraph",
    "Engine",
    "Hooks",
    "RunResult",
    "build_graph",
    "resolve",
]
