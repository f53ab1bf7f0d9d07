# tests/conftest.py
"""
Fixtures compartilhados para testes do buildflow.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas (YAML e dict)
- RunContext controlado (sem ler o ambiente real do processo)
- um gravador de chamadas para ações de tasks
- um relógio determinístico para durações e timestamps

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Ações de teste são closures que registram a ordem de execução
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa uma run real
    - Nenhuma fixture depende de variáveis de ambiente do processo
    - Nenhuma fixture realiza I/O (arquivos ficam em `tmp_path` nos testes)

Este módulo existe como infraestrutura de teste e não
como validação funcional do engine.
"""

from datetime import datetime, timedelta, timezone

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de configuração padrão (defaults) semelhante ao uso real.

    Representa um `buildflow.defaults.yaml` típico: target padrão e
    opções por task, sobre o qual overrides locais são aplicados.
    """
    return """\
engine:
  default_target: Default
tasks:
  Test:
    enabled: true
  Publish:
    enabled: true
    error_policy: stop-on-error
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """YAML local (override) que desabilita Publish e difere a política de Test."""
    return """\
tasks:
  Publish:
    enabled: false
  Test:
    error_policy: defer-on-error
"""


# =====================================================
# RunContext fixtures
# =====================================================

@pytest.fixture
def local_env() -> dict:
    """Ambiente de um build local: nenhuma variável de CI."""
    return {"HOME": "/home/dev", "CONFIGURATION": "Release"}


@pytest.fixture
def github_pr_env() -> dict:
    """Ambiente de um build de pull request no GitHub Actions."""
    return {
        "CI": "true",
        "GITHUB_ACTIONS": "true",
        "GITHUB_EVENT_NAME": "pull_request",
        "NUGET_API_KEY": "secret",
    }


@pytest.fixture
def dummy_ctx(local_env):
    """
    RunContext determinístico para testes de engine e runner.

    Decisões arquiteturais:
        - Construído a partir de um ambiente explícito (nunca os.environ)
        - SO fixo (linux) para não depender da máquina de testes
        - Config vazia; testes que precisam de config constroem o próprio contexto
    """
    from buildflow.core.run_context import RunContext

    return RunContext.from_environment(local_env, system="Linux")


@pytest.fixture
def make_ctx(local_env):
    """Factory de RunContext com config explícita."""
    from buildflow.core.run_context import RunContext

    def _make(config=None, env=None, system="Linux"):
        return RunContext.from_environment(
            local_env if env is None else env,
            system=system,
            config=config or {},
        )

    return _make


# =====================================================
# Ações e relógio
# =====================================================

class _Recorder:
    """Registra a ordem em que ações de tasks são invocadas."""

    def __init__(self):
        self.calls = []

    def action(self, name, *, fail=False):
        def _action(ctx):
            self.calls.append(name)
            if fail:
                raise RuntimeError(f"{name} boom")

        return _action

    def for_each(self, name, *, fail_on=None):
        def _action(ctx, item):
            self.calls.append(f"{name}:{item}")
            if fail_on is not None and item == fail_on:
                raise RuntimeError(f"{name} failed on {item}")

        return _action


@pytest.fixture
def recorder():
    """Gravador de chamadas; `recorder.calls` mantém a ordem de execução."""
    return _Recorder()


@pytest.fixture
def fixed_clock():
    """Relógio determinístico: cada chamada avança exatamente 1 segundo."""
    state = {"now": datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc)}

    def _clock():
        current = state["now"]
        state["now"] = current + timedelta(seconds=1)
        return current

    return _clock
