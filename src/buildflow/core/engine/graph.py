# src/buildflow/core/engine/graph.py
"""
Construtor do grafo de dependências entre Tasks.

Este módulo transforma as Tasks registradas e seus nomes de dependência
em um grafo dirigido validado, pronto para o scheduler.

Validações (todas antes de qualquer execução):
    - toda dependência declarada (`depends_on`) resolve para uma task registrada
    - todo dependee declarado (`dependees`) resolve para uma task registrada
    - o grafo é acíclico

Decisões arquiteturais:
    - A detecção de ciclo usa DFS com coloração (branco/cinza/preto);
      tasks são visitadas na ordem de registro e dependências na ordem de
      declaração, então o primeiro ciclo fechado é sempre o mesmo
    - `dependees` são convertidos em arestas comuns: "X é dependência de Y"
      equivale a acrescentar X ao final de `depends_on` de Y
    - Construir o grafo congela o registry: nenhuma task é redefinida depois

Invariantes:
    - Um grafo construído é sempre acíclico e completamente resolvido
    - A ordem das dependências de cada task é estável

Limites explícitos:
    - Não calcula a ordem de execução (responsabilidade do scheduler)
    - Não executa tasks nem consulta o RunContext
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Tuple

from buildflow.core.exceptions import (
    CyclicDependencyError,
    UnknownDependencyError,
    UnknownTaskError,
)
from buildflow.core.pipeline.registry import TaskRegistry
from buildflow.core.pipeline.task import Task


WHITE, GRAY, BLACK = 0, 1, 2


@dataclass(frozen=True)
class DependencyGraph:
    """Grafo validado: tasks por nome, ordem de registro e arestas ordenadas."""

    tasks: Mapping[str, Task]
    order: Tuple[str, ...]
    edges: Mapping[str, Tuple[str, ...]]

    def task(self, name: str) -> Task:
        if name not in self.tasks:
            raise UnknownTaskError(name)
        return self.tasks[name]

    def dependencies_of(self, name: str) -> Tuple[str, ...]:
        if name not in self.edges:
            raise UnknownTaskError(name)
        return self.edges[name]

    def __contains__(self, name: object) -> bool:
        return name in self.tasks


def _collect_edges(tasks: List[Task], known: Mapping[str, Task]) -> Dict[str, List[str]]:
    edges: Dict[str, List[str]] = {}
    for t in tasks:
        for dep in t.depends_on:
            if dep not in known:
                raise UnknownDependencyError(t.name, dep)
        edges[t.name] = list(t.depends_on)

    for t in tasks:
        for dependee in t.dependees:
            if dependee not in known:
                raise UnknownDependencyError(t.name, dependee)
            if t.name not in edges[dependee]:
                edges[dependee].append(t.name)
    return edges


def find_cycle(order: List[str], edges: Mapping[str, List[str]]) -> List[str]:
    """
    Retorna o primeiro ciclo encontrado (lista de nomes) ou lista vazia.

    DFS iterativa sobre `order` com marcação de caminho (cinza). Ao encontrar uma
    aresta para um nó cinza, o ciclo é o trecho da pilha a partir dele.
    """
    color: Dict[str, int] = {name: WHITE for name in order}

    for root in order:
        if color[root] != WHITE:
            continue
        color[root] = GRAY
        path: List[str] = [root]
        pending: List[Iterator[str]] = [iter(edges[root])]

        while pending:
            for dep in pending[-1]:
                if color[dep] == GRAY:
                    return path[path.index(dep):]
                if color[dep] == WHITE:
                    color[dep] = GRAY
                    path.append(dep)
                    pending.append(iter(edges[dep]))
                    break
            else:
                pending.pop()
                color[path.pop()] = BLACK
    return []


def build_graph(registry: TaskRegistry) -> DependencyGraph:
    """
    Valida o registry e produz o grafo de dependências.

    Args:
        registry (TaskRegistry): Tasks registradas.

    Returns:
        DependencyGraph: grafo validado (acíclico, sem referências pendentes).

    Raises:
        UnknownDependencyError: Se uma task referenciar task inexistente.
        CyclicDependencyError: Se houver ciclo; carrega o ciclo encontrado.
    """
    tasks = registry.list()
    known = {t.name: t for t in tasks}

    edges = _collect_edges(tasks, known)
    order = [t.name for t in tasks]

    cycle = find_cycle(order, edges)
    if cycle:
        raise CyclicDependencyError(cycle)

    registry.freeze()

    return DependencyGraph(
        tasks=dict(known),
        order=tuple(order),
        edges={name: tuple(deps) for name, deps in edges.items()},
    )
