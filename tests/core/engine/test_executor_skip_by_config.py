# tests/core/engine/test_executor_skip_by_config.py
"""
Testes de skip de tasks pelo Engine: configuração e critérios.

Os testes asseguram que:
- tasks desabilitadas por config (`tasks.<nome>.enabled: false`) não executam
- tasks com critério falso são SKIPPED, com o motivo no resumo
- o skip não se propaga: dependentes de uma task pulada executam normalmente
- critérios são avaliados no momento da execução, contra o RunContext
- exceção ao avaliar um critério é tratada como falha da task

Decisões arquiteturais:
    - A decisão de skip ocorre no Engine, não no scheduler
    - Tasks puladas continuam presentes no resultado
"""
import pytest

try:
    from buildflow.core.engine.engine import Engine
    from buildflow.core.engine.graph import build_graph
    from buildflow.core.engine.scheduler import resolve
    from buildflow.core.pipeline.registry import TaskRegistry
    from buildflow.core.pipeline.task import Criterion, make_task
    from buildflow.core.pipeline.types import RunState, TaskStatus
except Exception as e:
    Engine = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing Engine. Import error: {_IMPORT_ERR}""")


def _plan(target, *tasks):
    reg = TaskRegistry()
    for t in tasks:
        reg.register(t)
    return resolve(build_graph(reg), target)


def test_skip_by_config(make_ctx, recorder):
    """
    Verifica que `enabled: false` marca a task como SKIPPED sem executá-la.

    Invariantes:
        - A ação da task desabilitada nunca é invocada
        - O resumo registra o motivo ("skipped by config")
        - A run permanece completa
    """
    _require_imports()
    ctx = make_ctx({"tasks": {"Publish": {"enabled": False}}})
    ordered = _plan(
        "Publish",
        make_task("Build", action=recorder.action("Build")),
        make_task("Publish", depends_on=["Build"], action=recorder.action("Publish")),
    )

    result = Engine(ctx).run(ordered)

    assert recorder.calls == ["Build"]
    publish = result.report_for("Publish")
    assert publish.status == TaskStatus.SKIPPED
    assert publish.summary == "skipped by config"
    assert result.completed is True


def test_false_criterion_skips_without_cascade(dummy_ctx, recorder):
    """
    Verifica que o skip de Build não pula Test, que depende dele.

    Invariantes:
        - Build é SKIPPED e sua ação não executa
        - Test executa normalmente (SUCCEEDED)
    """
    _require_imports()
    ordered = _plan(
        "Test",
        make_task("Build", criteria=lambda ctx: False, action=recorder.action("Build")),
        make_task("Test", depends_on=["Build"], action=recorder.action("Test")),
    )

    result = Engine(dummy_ctx).run(ordered)

    assert recorder.calls == ["Test"]
    assert result.statuses() == {"Build": TaskStatus.SKIPPED, "Test": TaskStatus.SUCCEEDED}
    assert result.report_for("Build").summary == "skipped by criteria"
    assert result.completed


def test_criterion_reason_is_reported(make_ctx, recorder):
    _require_imports()
    ctx = make_ctx()
    ordered = _plan(
        "Publish",
        make_task(
            "Publish",
            criteria=[
                Criterion(lambda c: c.is_running_on_build_server(), reason="not on a build server"),
                Criterion(lambda c: not c.is_pull_request(), reason="pull request build"),
            ],
            action=recorder.action("Publish"),
        ),
    )

    result = Engine(ctx).run(ordered)

    assert recorder.calls == []
    assert result.report_for("Publish").summary == "not on a build server"


def test_criteria_evaluated_against_context(make_ctx, github_pr_env, recorder):
    _require_imports()
    ctx = make_ctx(env=github_pr_env)
    ordered = _plan(
        "Publish",
        make_task(
            "Publish",
            criteria=[
                lambda c: c.is_running_on_build_server(),
                Criterion(lambda c: not c.is_pull_request(), reason="pull request build"),
            ],
            action=recorder.action("Publish"),
        ),
    )

    result = Engine(ctx).run(ordered)

    assert result.report_for("Publish").summary == "pull request build"


def test_all_criteria_true_runs_action(make_ctx, github_pr_env, recorder):
    _require_imports()
    ctx = make_ctx(env=github_pr_env)
    ordered = _plan(
        "Test",
        make_task(
            "Test",
            criteria=[lambda c: c.is_running_on_build_server(), True],
            action=recorder.action("Test"),
        ),
    )

    result = Engine(ctx).run(ordered)

    assert recorder.calls == ["Test"]
    assert result.report_for("Test").status == TaskStatus.SUCCEEDED


def test_criterion_exception_fails_task(dummy_ctx, recorder):
    _require_imports()

    def broken(ctx):
        raise RuntimeError("cannot evaluate")

    ordered = _plan(
        "Test",
        make_task("Build", criteria=broken, action=recorder.action("Build")),
        make_task("Test", depends_on=["Build"], action=recorder.action("Test")),
    )

    result = Engine(dummy_ctx).run(ordered)

    build = result.report_for("Build")
    assert build.status == TaskStatus.FAILED
    assert build.error.stage == "criteria"
    assert recorder.calls == []
    assert result.state == RunState.ABORTED
    assert result.not_run == ("Test",)
