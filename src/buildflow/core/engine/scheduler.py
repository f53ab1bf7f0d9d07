# src/buildflow/core/engine/scheduler.py
"""
Scheduler: ordem de execução de um target.

Dado um grafo validado e o nome do target, `resolve` devolve a sequência
de tasks a executar:
    - todas as dependências transitivas do target, e o próprio target
    - cada task exatamente uma vez (dependências compartilhadas em
      "diamante" entram uma única vez, no ponto mais cedo exigido)
    - para todo par (A depende de B), B aparece antes de A

Algoritmo: DFS pós-ordem iterativa (pilha explícita, sem recursão) a partir
do target, visitando as dependências na ordem em que foram declaradas e
usando um conjunto de visitados.

Invariantes:
    - Mesmo grafo + mesmo target ⇒ mesma ordem (idempotente)
    - O target é sempre o último elemento

Limites explícitos:
    - Não detecta ciclos (o grafo já foi validado por `build_graph`)
    - Não avalia critérios nem executa tasks
"""

from __future__ import annotations

from typing import Iterator, List, Set, Tuple

from buildflow.core.exceptions import UnknownTaskError
from buildflow.core.pipeline.task import Task

from .graph import DependencyGraph


def resolve(graph: DependencyGraph, target: str, *, exclusive: bool = False) -> List[Task]:
    """
    Calcula a ordem de execução para `target`.

    Args:
        graph (DependencyGraph): grafo validado.
        target (str): nome da task solicitada.
        exclusive (bool): quando True, agenda apenas o target, sem dependências.

    Returns:
        List[Task]: tasks em ordem de execução.

    Raises:
        UnknownTaskError: Se `target` não estiver registrado.
    """
    if target not in graph:
        raise UnknownTaskError(target)

    if exclusive:
        return [graph.task(target)]

    visited: Set[str] = {target}
    ordered: List[Task] = []
    # pilha explícita de (task, iterador das dependências pendentes)
    stack: List[Tuple[str, Iterator[str]]] = [(target, iter(graph.dependencies_of(target)))]

    while stack:
        name, pending = stack[-1]
        for dep in pending:
            if dep not in visited:
                visited.add(dep)
                stack.append((dep, iter(graph.dependencies_of(dep))))
                break
        else:
            stack.pop()
            ordered.append(graph.task(name))

    return ordered
