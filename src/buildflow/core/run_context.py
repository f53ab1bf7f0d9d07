"""
RunContext — Contexto canônico de execução do buildflow.

Este módulo define o **RunContext**, o valor compartilhado passado a todos os
critérios e ações durante uma run.

Diferente de um estado global de build, o RunContext é:
- construído uma única vez no início da invocação
- imutável (frozen): tasks apenas leem
- explícito: é recebido por parâmetro, nunca importado como global

Consultas expostas:
- is_local_build / is_running_on_build_server / build_server
- is_running_on_unix / is_running_on_windows
- is_pull_request
- get_environment_variable
- config (configuração efetiva, somente leitura)

A ausência de uma variável de ambiente não é erro nesta camada: `None` é
devolvido e a task que consulta decide se isso é fatal.
"""

from __future__ import annotations

import copy
import os
import platform
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from buildflow.core.config.loader import validate_config


WINDOWS = "windows"
LINUX = "linux"
OSX = "osx"
UNIX = "unix"


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _present(value: Optional[str]) -> bool:
    return bool((value or "").strip())


def _github_pr(env: Mapping[str, str]) -> bool:
    return env.get("GITHUB_EVENT_NAME", "") in {"pull_request", "pull_request_target"}


def _travis_pr(env: Mapping[str, str]) -> bool:
    value = (env.get("TRAVIS_PULL_REQUEST") or "").strip().lower()
    return bool(value) and value != "false"


# (nome, detector, detector de pull request); a primeira correspondência vence.
_BUILD_SERVERS: List[Tuple[str, Callable[[Mapping[str, str]], bool], Callable[[Mapping[str, str]], bool]]] = [
    ("GitHubActions", lambda e: _truthy(e.get("GITHUB_ACTIONS")), _github_pr),
    ("AzurePipelines", lambda e: _truthy(e.get("TF_BUILD")),
     lambda e: _present(e.get("SYSTEM_PULLREQUEST_PULLREQUESTID"))),
    ("AppVeyor", lambda e: _truthy(e.get("APPVEYOR")),
     lambda e: _present(e.get("APPVEYOR_PULL_REQUEST_NUMBER"))),
    ("TravisCI", lambda e: _truthy(e.get("TRAVIS")), _travis_pr),
    ("GitLabCI", lambda e: _truthy(e.get("GITLAB_CI")),
     lambda e: _present(e.get("CI_MERGE_REQUEST_IID"))),
    ("Jenkins", lambda e: _present(e.get("JENKINS_URL")),
     lambda e: _present(e.get("CHANGE_ID"))),
    ("TeamCity", lambda e: _present(e.get("TEAMCITY_VERSION")), lambda e: False),
    ("CircleCI", lambda e: _truthy(e.get("CIRCLECI")),
     lambda e: _present(e.get("CIRCLE_PULL_REQUEST"))),
    ("GenericCI", lambda e: _truthy(e.get("CI")), lambda e: False),
]


def detect_build_server(env: Mapping[str, str]) -> Tuple[Optional[str], bool]:
    """Retorna `(nome_do_build_server | None, is_pull_request)`."""
    for name, detect, detect_pr in _BUILD_SERVERS:
        if detect(env):
            return name, bool(detect_pr(env))
    return None, False


def detect_os_family(system: Optional[str] = None) -> str:
    system = (system if system is not None else platform.system()).strip().lower()
    if system.startswith("win") or system.startswith("cygwin") or system.startswith("msys"):
        return WINDOWS
    if system == "linux":
        return LINUX
    if system == "darwin":
        return OSX
    return UNIX


@dataclass(frozen=True)
class RunContext:
    """
    Contexto de execução de uma run (somente leitura).

    Campos canônicos:
    - os_family: "windows", "linux", "osx" ou "unix"
    - build_server: nome do CI detectado, ou None em builds locais
    - pull_request: build disparado por pull/merge request
    - environment: snapshot imutável das variáveis de ambiente
    - config: configuração efetiva (snapshot imutável)

    A config é validada na construção (`validate_config`), então chaves
    reconhecidas inválidas falham antes de qualquer task executar.

    Raises:
        InvalidConfigValueError: Se `engine`/`tasks` tiverem valores inválidos.
    """

    os_family: str
    build_server: Optional[str] = None
    pull_request: bool = False
    environment: Mapping[str, str] = field(default_factory=dict)
    config: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # snapshot: alterações posteriores na origem não vazam para a run
        config = validate_config(copy.deepcopy(dict(self.config)))
        object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))
        object.__setattr__(self, "config", MappingProxyType(config))

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        system: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> "RunContext":
        """Constrói o contexto a partir do ambiente do processo (ou de um mapa explícito)."""
        env = dict(os.environ if environ is None else environ)
        build_server, pull_request = detect_build_server(env)
        return cls(
            os_family=detect_os_family(system),
            build_server=build_server,
            pull_request=pull_request,
            environment=env,
            config=config or {},
        )

    # -----------------------------
    # Consultas
    # -----------------------------
    def is_local_build(self) -> bool:
        return self.build_server is None

    def is_running_on_build_server(self) -> bool:
        return self.build_server is not None

    def is_running_on_windows(self) -> bool:
        return self.os_family == WINDOWS

    def is_running_on_unix(self) -> bool:
        return self.os_family != WINDOWS

    def is_pull_request(self) -> bool:
        return self.pull_request

    def get_environment_variable(self, name: str) -> Optional[str]:
        return self.environment.get(name)

    # -----------------------------
    # Configuração por task
    # -----------------------------
    def task_config(self, task_name: str) -> Mapping[str, Any]:
        tasks_cfg = self.config.get("tasks", {}) or {}
        return tasks_cfg.get(task_name, {}) or {}
