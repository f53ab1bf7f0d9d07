"""
src/buildflow/report/summary_md.py

Renderizadores Markdown do buildflow.

- `render_task_list(registry)`: listagem de tasks (ajuda/descrição) com as
  dependências efetivas (incluindo `dependees`), na ordem de registro.
- `render_run_summary(result)`: resumo de uma run, tabela Task | Status |
  Duration, erros e resultado final.

Regras:
- O resumo é derivado EXCLUSIVAMENTE do RunResult (não reexecuta, não infere).
- Mesma entrada => mesmo Markdown (determinismo).
- Tasks não tentadas aparecem com status `not run`; nunca como sucesso.
"""

from __future__ import annotations

from typing import Dict, List

from buildflow.core.engine.engine import RunResult
from buildflow.core.pipeline.registry import TaskRegistry


def _escape_cell(value: str) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def _format_duration(ms: int) -> str:
    seconds, millis = divmod(int(ms), 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def _effective_dependencies(registry: TaskRegistry) -> Dict[str, List[str]]:
    """Dependências de cada task incluindo as declaradas via `dependees` de outras.

    Mesma ordem das arestas do grafo; não valida nem congela o registry.
    """
    deps: Dict[str, List[str]] = {t.name: list(t.depends_on) for t in registry.list()}
    for task in registry.list():
        for dependee in task.dependees:
            if dependee in deps and task.name not in deps[dependee]:
                deps[dependee].append(task.name)
    return deps


def render_task_list(registry: TaskRegistry) -> str:
    lines: List[str] = ["# Tasks", ""]
    if len(registry) == 0:
        lines.append("_No tasks defined._")
        return "\n".join(lines) + "\n"

    lines.append("| Task | Description | Depends on |")
    lines.append("|---|---|---|")
    effective = _effective_dependencies(registry)
    for task in registry.list():
        deps = ", ".join(effective[task.name]) or "-"
        lines.append(
            f"| {_escape_cell(task.name)} | {_escape_cell(task.description or '-')} | {_escape_cell(deps)} |"
        )
    return "\n".join(lines) + "\n"


def render_run_summary(result: RunResult) -> str:
    if not isinstance(result, RunResult):
        raise ValueError("RunResult is required to render the run summary")

    lines: List[str] = ["# Run Summary", ""]
    lines.append("| Task | Status | Duration |")
    lines.append("|---|---|---|")

    total_ms = 0
    for report in result.reports:
        total_ms += report.duration_ms
        lines.append(
            f"| {_escape_cell(report.task_name)} | {report.status.value} | {_format_duration(report.duration_ms)} |"
        )
    for name in result.not_run:
        lines.append(f"| {_escape_cell(name)} | not run | - |")

    lines.append(f"| **Total** | | {_format_duration(total_ms)} |")
    lines.append("")

    errors = result.errors
    if errors or result.hook_errors:
        lines.append("## Errors")
        lines.append("")
        for error in errors:
            lines.append(f"- `{error.task_name}`: {_escape_cell(error.message)}")
        for hook_error in result.hook_errors:
            lines.append(f"- hook `{hook_error.hook}`: {_escape_cell(hook_error.message)}")
        lines.append("")

    outcome = "succeeded" if result.completed else "failed"
    lines.append(f"**Result:** {outcome} ({result.state.value})")
    return "\n".join(lines) + "\n"
