# tests/core/engine/test_graph_invalid.py
"""
Testes de validação de grafos inválidos no graph builder.

Os testes asseguram que:
- dependências inexistentes são detectadas e rejeitadas
- dependees inexistentes também são rejeitados
- ciclos são identificados, com a lista ordenada de tasks do ciclo
- nenhuma ação executa quando o grafo é inválido

Decisões arquiteturais:
    - O pipeline deve formar um DAG válido
    - Erros estruturais são tratados como falhas fatais, antes da execução

Limites explícitos:
    - Não valida ordenação (coberta em test_scheduler_order)
"""

import pytest

try:
    from buildflow.core.engine.graph import build_graph, find_cycle
    from buildflow.core.engine.runner import BuildRunner
    from buildflow.core.exceptions import CyclicDependencyError, UnknownDependencyError
    from buildflow.core.pipeline.registry import TaskRegistry
    from buildflow.core.pipeline.task import make_task
except Exception as e:
    build_graph = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o graph builder e suas exceções estejam disponíveis.

    Evita falsos negativos causados por ImportError silencioso.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing graph builder. Implement:
- src/buildflow/core/engine/graph.py (build_graph)
- CyclicDependencyError / UnknownDependencyError
Import error: {_IMPORT_ERR}
""")


def _registry(*tasks):
    reg = TaskRegistry()
    for t in tasks:
        reg.register(t)
    return reg


def test_unknown_dependency():
    _require_imports()
    reg = _registry(make_task("Build", depends_on=["Restore"]))

    with pytest.raises(UnknownDependencyError) as exc_info:
        build_graph(reg)

    assert exc_info.value.task_name == "Build"
    assert exc_info.value.missing == "Restore"


def test_unknown_dependee():
    _require_imports()
    reg = _registry(make_task("Clean", dependees=["Build"]))

    with pytest.raises(UnknownDependencyError) as exc_info:
        build_graph(reg)
    assert exc_info.value.missing == "Build"


def test_three_task_cycle_names_all_members():
    """
    Verifica que o ciclo A→B→C→A é rejeitado com as três tasks, em ordem.

    A travessia começa em A (primeira registrada), desce por B e C e
    encontra a aresta de retorno para A.
    """
    _require_imports()
    reg = _registry(
        make_task("A", depends_on=["B"]),
        make_task("B", depends_on=["C"]),
        make_task("C", depends_on=["A"]),
    )

    with pytest.raises(CyclicDependencyError) as exc_info:
        build_graph(reg)

    assert exc_info.value.cycle == ["A", "B", "C"]
    assert "A -> B -> C -> A" in str(exc_info.value)


def test_cycle_report_follows_registration_order():
    _require_imports()
    reg = _registry(
        make_task("Entry", depends_on=["B"]),
        make_task("B", depends_on=["C"]),
        make_task("C", depends_on=["B"]),
    )
    with pytest.raises(CyclicDependencyError) as exc_info:
        build_graph(reg)
    assert exc_info.value.cycle == ["B", "C"]


def test_self_dependency_is_a_cycle():
    _require_imports()
    reg = _registry(make_task("Build", depends_on=["Build"]))
    with pytest.raises(CyclicDependencyError) as exc_info:
        build_graph(reg)
    assert exc_info.value.cycle == ["Build"]


def test_cycle_through_dependees():
    _require_imports()
    reg = _registry(
        make_task("Build"),
        make_task("Test", depends_on=["Build"], dependees=["Build"]),
    )
    with pytest.raises(CyclicDependencyError):
        build_graph(reg)


def test_find_cycle_on_acyclic_graph_is_empty():
    _require_imports()
    edges = {"a": [], "b": ["a"], "c": ["a", "b"]}
    assert find_cycle(["a", "b", "c"], edges) == []


def test_invalid_graph_runs_no_task(dummy_ctx, recorder):
    _require_imports()
    runner = BuildRunner(dummy_ctx)
    runner.define_task("A", depends_on=["C"], action=recorder.action("A"))
    runner.define_task("B", depends_on=["A"], action=recorder.action("B"))
    runner.define_task("C", depends_on=["B"], action=recorder.action("C"))

    with pytest.raises(CyclicDependencyError):
        runner.execute("C")

    assert recorder.calls == []


def test_build_graph_freezes_registry():
    _require_imports()
    reg = _registry(make_task("Build"))
    graph = build_graph(reg)
    assert reg.frozen
    assert "Build" in graph
