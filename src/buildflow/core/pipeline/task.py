# src/buildflow/core/pipeline/task.py
"""
Contrato canônico de Task do buildflow.

Uma Task é a menor unidade agendável do pipeline de build: um nome único,
dependências declaradas, critérios de execução, política de erro e no
máximo uma ação.

A ação é uma variante polimórfica:
    - SingleAction  → callback `fn(ctx)` invocado uma vez
    - ForEachAction → callback `fn(ctx, item)` invocado uma vez por
                      elemento de uma sequência fornecida pelo chamador

O Engine trata as duas formas de maneira uniforme ("invocar, capturar
resultado"); a única diferença visível é o índice do elemento em falhas
de tasks for-each.

Princípios fundamentais:
    - Tasks não conhecem o Engine nem o scheduler
    - Tasks não controlam ordem de execução
    - Critérios são atributos de primeira classe, avaliados pelo Engine
    - O RunContext é passado explicitamente a critérios e ações

Invariantes:
    - `name` é não vazio e único no registry
    - `depends_on` preserva a ordem de declaração, sem duplicatas
    - Uma Task é imutável após criada (frozen)

Limites explícitos:
    - Não executa a ação (responsabilidade do Engine)
    - Não valida se as dependências existem (responsabilidade do grafo)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, Union

from buildflow.core.exceptions import TaskDefinitionError

from .types import ErrorPolicy


@dataclass(frozen=True)
class Criterion:
    """Predicado que decide se a ação de uma task executa.

    `predicate` recebe o RunContext e retorna bool. `reason` é usado como
    resumo do skip quando o predicado é falso.
    """
    predicate: Callable[[Any], bool]
    reason: Optional[str] = None

    def evaluate(self, ctx: Any) -> bool:
        return bool(self.predicate(ctx))


@dataclass(frozen=True)
class SingleAction:
    """Ação executada uma única vez: `fn(ctx)`."""
    fn: Callable[[Any], Any]

    def invoke(self, ctx: Any) -> None:
        self.fn(ctx)


@dataclass(frozen=True)
class ForEachAction:
    """Ação executada uma vez por elemento: `fn(ctx, item)`.

    `items` é uma sequência ou um callable `items(ctx)`; em ambos os casos
    a sequência é materializada uma única vez por run via `resolve_items`.
    """
    fn: Callable[[Any, Any], Any]
    items: Union[Iterable[Any], Callable[[Any], Iterable[Any]]]

    def resolve_items(self, ctx: Any) -> Tuple[Any, ...]:
        source = self.items(ctx) if callable(self.items) else self.items
        return tuple(source)


Action = Union[SingleAction, ForEachAction]

CriteriaSpec = Union[None, bool, Callable[[Any], bool], Criterion, Sequence[Any]]


def _normalize_criteria(criteria: CriteriaSpec) -> Tuple[Criterion, ...]:
    if criteria is None:
        return ()
    if isinstance(criteria, (list, tuple)):
        out = []
        for c in criteria:
            out.extend(_normalize_criteria(c))
        return tuple(out)
    if isinstance(criteria, Criterion):
        return (criteria,)
    if isinstance(criteria, bool):
        # valor fixo conhecido na definição
        value = criteria
        return (Criterion(predicate=lambda _ctx: value),)
    if callable(criteria):
        return (Criterion(predicate=criteria),)
    raise TaskDefinitionError(
        f"Invalid criteria: {criteria!r}",
        details={"criteria_type": type(criteria).__name__},
    )


def _unique(names: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    out = []
    for n in names:
        if n not in seen:
            seen.add(n)
            out.append(n)
    return tuple(out)


@dataclass(frozen=True)
class Task:
    """
    Definição imutável de uma task.

    Atributos:
        - name: identificador único e case-sensitive
        - description: texto livre para listagem/ajuda
        - depends_on: nomes das dependências, na ordem de declaração
        - dependees: nomes de tasks que passam a depender desta
        - criteria: critérios (todos devem ser verdadeiros para executar)
        - error_policy: STOP_ON_ERROR (padrão) ou DEFER_ON_ERROR
        - action: SingleAction, ForEachAction ou None (task agregadora)
        - error_reporter: callback `fn(error)` chamado quando a task falha
        - finally_action: callback `fn(ctx)` chamado após toda tentativa
    """
    name: str
    description: str = ""
    depends_on: Tuple[str, ...] = ()
    dependees: Tuple[str, ...] = ()
    criteria: Tuple[Criterion, ...] = ()
    error_policy: ErrorPolicy = ErrorPolicy.STOP_ON_ERROR
    action: Optional[Action] = None
    error_reporter: Optional[Callable[[Exception], Any]] = field(default=None, compare=False)
    finally_action: Optional[Callable[[Any], Any]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise TaskDefinitionError("task.name must be a non-empty string")
        for dep in self.depends_on + self.dependees:
            if not isinstance(dep, str) or not dep.strip():
                raise TaskDefinitionError(
                    f"Task '{self.name}' declares an invalid dependency name: {dep!r}",
                    details={"task": self.name},
                )

    @property
    def is_for_each(self) -> bool:
        return isinstance(self.action, ForEachAction)


def make_task(
    name: str,
    *,
    description: str = "",
    depends_on: Iterable[str] = (),
    dependees: Iterable[str] = (),
    criteria: CriteriaSpec = None,
    error_policy: Union[ErrorPolicy, str] = ErrorPolicy.STOP_ON_ERROR,
    action: Optional[Callable[[Any], Any]] = None,
    for_each: Optional[Callable[[Any, Any], Any]] = None,
    items: Any = None,
    error_reporter: Optional[Callable[[Exception], Any]] = None,
    finally_action: Optional[Callable[[Any], Any]] = None,
) -> Task:
    """
    Constrói uma Task a partir da superfície declarativa de definição.

    Regras:
        - `action` e `for_each` são mutuamente exclusivos
        - `for_each` exige `items` (sequência ou callable `items(ctx)`)
        - `items` sem `for_each` é erro de definição
        - `depends_on` aceita uma string única ou um iterável de nomes

    Raises:
        TaskDefinitionError: se a definição for inconsistente.
    """
    if action is not None and for_each is not None:
        raise TaskDefinitionError(
            f"Task '{name}' defines both `action` and `for_each`",
            details={"task": name},
            hint="Use apenas uma forma de ação por task.",
        )
    if for_each is not None and items is None:
        raise TaskDefinitionError(
            f"Task '{name}' defines `for_each` without `items`",
            details={"task": name},
        )
    if items is not None and for_each is None:
        raise TaskDefinitionError(
            f"Task '{name}' defines `items` without `for_each`",
            details={"task": name},
        )

    resolved_action: Optional[Action] = None
    if action is not None:
        resolved_action = SingleAction(fn=action)
    elif for_each is not None:
        resolved_action = ForEachAction(fn=for_each, items=items)

    if isinstance(depends_on, str):
        depends_on = [depends_on]
    if isinstance(dependees, str):
        dependees = [dependees]

    try:
        policy = ErrorPolicy.parse(error_policy)
    except ValueError as e:
        raise TaskDefinitionError(str(e), details={"task": name}) from e

    return Task(
        name=name,
        description=description or "",
        depends_on=_unique(depends_on),
        dependees=_unique(dependees),
        criteria=_normalize_criteria(criteria),
        error_policy=policy,
        action=resolved_action,
        error_reporter=error_reporter,
        finally_action=finally_action,
    )
