# tests/core/reporting/test_run_summary_md.py
"""
Testes dos renderizadores Markdown (listagem de tasks e resumo de run).

Os testes asseguram que:
- a listagem preserva a ordem de registro e mostra dependências
- o resumo tem uma linha por task tentada, com status e duração
- tasks não tentadas aparecem como `not run`, nunca como sucesso
- erros de tasks e hooks são listados
- o resultado final reflete `completed` e o estado da run
- a mesma entrada produz o mesmo Markdown
"""
import pytest

try:
    from buildflow.core.engine.engine import RunResult
    from buildflow.core.engine.runner import BuildRunner
    from buildflow.core.pipeline.registry import TaskRegistry
    from buildflow.core.pipeline.task import make_task
    from buildflow.core.pipeline.types import RunState, TaskReport, TaskStatus
    from buildflow.report import render_run_summary, render_task_list
except Exception as e:
    render_run_summary = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing Markdown renderers. Implement:
- src/buildflow/report/summary_md.py
Import error: {_IMPORT_ERR}
""")


def test_task_list():
    _require_imports()
    reg = TaskRegistry()
    reg.register(make_task("Clean", description="Remove artifacts"))
    reg.register(make_task("Build", depends_on=["Clean", "Restore"]))

    md = render_task_list(reg)

    assert md.splitlines() == [
        "# Tasks",
        "",
        "| Task | Description | Depends on |",
        "|---|---|---|",
        "| Clean | Remove artifacts | - |",
        "| Build | - | Clean, Restore |",
    ]


def test_empty_task_list():
    _require_imports()
    assert "_No tasks defined._" in render_task_list(TaskRegistry())


def test_run_summary_for_successful_result():
    _require_imports()
    result = RunResult(
        completed=True,
        reports=(
            TaskReport("Build", TaskStatus.SUCCEEDED, duration_ms=1500),
            TaskReport("Publish", TaskStatus.SKIPPED, summary="skipped by config"),
        ),
    )

    md = render_run_summary(result)

    assert "| Build | succeeded | 00:00:01.500 |" in md
    assert "| Publish | skipped | 00:00:00.000 |" in md
    assert "| **Total** | | 00:00:01.500 |" in md
    assert "## Errors" not in md
    assert md.rstrip().endswith("**Result:** succeeded (completed)")


def test_run_summary_for_aborted_run(dummy_ctx, fixed_clock):
    """
    Verifica o resumo de uma run abortada por stop-on-error.

    Invariantes:
        - Build aparece como failed, com a mensagem no bloco de erros
        - Test aparece como `not run`
        - O resultado final é `failed (aborted)`
    """
    _require_imports()
    runner = BuildRunner(dummy_ctx, clock=fixed_clock)
    runner.define_task("Build", action=lambda ctx: 1 / 0)
    runner.define_task("Test", depends_on=["Build"], action=lambda ctx: None)
    result = runner.execute("Test")

    md = render_run_summary(result)

    assert "| Build | failed | 00:00:01.000 |" in md
    assert "| Test | not run | - |" in md
    assert "- `Build`: Task 'Build' failed: division by zero" in md
    assert md.rstrip().endswith("**Result:** failed (aborted)")
    assert render_run_summary(result) == md


def test_run_summary_lists_hook_errors(dummy_ctx):
    _require_imports()
    runner = BuildRunner(dummy_ctx)
    runner.define_task("Build")

    @runner.teardown
    def cleanup(ctx):
        raise OSError("disk full")

    md = render_run_summary(runner.execute("Build"))

    assert "- hook `teardown`: Hook 'teardown' failed: disk full" in md
    assert md.rstrip().endswith("**Result:** failed (completed)")


def test_run_summary_requires_run_result():
    _require_imports()
    with pytest.raises(ValueError):
        render_run_summary({"completed": True})


def test_long_durations_are_formatted():
    _require_imports()
    result = RunResult(
        completed=True,
        reports=(TaskReport("Pack", TaskStatus.SUCCEEDED, duration_ms=3_723_004),),
        state=RunState.COMPLETED,
    )
    assert "| Pack | succeeded | 01:02:03.004 |" in render_run_summary(result)


def test_task_list_includes_dependencies_declared_as_dependees():
    """A listagem mostra as mesmas dependências que o scheduler usa."""
    _require_imports()
    reg = TaskRegistry()
    reg.register(make_task("Build", depends_on=["Restore"]))
    reg.register(make_task("Restore"))
    reg.register(make_task("Clean", dependees=["Build"]))

    md = render_task_list(reg)

    assert "| Build | - | Restore, Clean |" in md
    assert "| Clean | - | - |" in md
    assert not reg.frozen
