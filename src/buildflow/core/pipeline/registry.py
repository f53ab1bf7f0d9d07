# src/buildflow/core/pipeline/registry.py
"""
Registro estrutural de Tasks do buildflow.

Este módulo define o `TaskRegistry`, responsável por registrar Tasks
e garantir a integridade estrutural das definições antes de qualquer
construção de grafo, agendamento ou execução.

Responsabilidades do módulo:
    - Validar unicidade de `task.name`
    - Preservar ordem de registro das Tasks (listagem/ajuda estável)
    - Expor acesso controlado às Tasks registradas
    - Congelar as definições quando o grafo é construído

Decisões arquiteturais:
    - A ordem de registro não influencia a ordem de execução
      (que é derivada do grafo), apenas listagem e desempate de travessia
    - A ordem de inserção é mantida separadamente do armazenamento
    - Um registro que falha não altera o estado interno

Invariantes:
    - Cada Task registrada possui um `task.name` único
    - A lista de Tasks reflete exatamente a ordem de registro
    - Após `freeze()`, nenhuma Task é adicionada ou redefinida

Limites explícitos:
    - Não resolve dependências (não é o graph builder)
    - Não executa ações
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from buildflow.core.exceptions import (
    DuplicateTaskError,
    RegistryFrozenError,
    TaskDefinitionError,
    UnknownTaskError,
)

from .task import Task


@dataclass
class TaskRegistry:
    """
    Registro canônico de Tasks para validação estrutural pré-execução.

    O `TaskRegistry` atua como salvaguarda estrutural, garantindo que:
        - cada Task possua um nome válido
        - não existam nomes duplicados
        - a ordem de registro seja preservada explicitamente

    Nenhuma ação é invocada no momento do registro.
    """

    _tasks: Dict[str, Task] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)
    _frozen: bool = field(default=False, init=False, repr=False)

    def register(self, task: Task) -> Task:
        if not isinstance(task, Task):
            raise TaskDefinitionError(
                f"Expected Task, received: {type(task).__name__}"
            )
        if self._frozen:
            raise RegistryFrozenError(task.name)
        if task.name in self._tasks:
            raise DuplicateTaskError(task.name)

        self._tasks[task.name] = task
        self._order.append(task.name)
        return task

    def get(self, name: str) -> Task:
        if name not in self._tasks:
            raise UnknownTaskError(name)
        return self._tasks[name]

    def list(self) -> List[Task]:
        return [self._tasks[n] for n in self._order]

    def names(self) -> List[str]:
        return list(self._order)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.list())
