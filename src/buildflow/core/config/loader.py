# src/buildflow/core/config/loader.py
"""
Loader canônico de configuração do buildflow.

A configuração de uma run é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

Chaves reconhecidas (v1):

    engine:
      default_target: Default
    tasks:
      <nome>:
        enabled: true | false
        error_policy: stop-on-error | defer-on-error

Chaves desconhecidas são preservadas (tasks podem consultá-las via
`RunContext.config`), mas chaves reconhecidas com valor inválido são erro.

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não lê variáveis de ambiente nem argumentos de linha de comando
    - Não interage com Engine ou Tasks
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from buildflow.core.pipeline.types import ErrorPolicy

from .merge import deep_merge
from .errors import (
    ConfigNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnsupportedConfigFormatError,
)


DEFAULT_TARGET = "Default"


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - Arquivos vazios são interpretados como dicionários vazios
        - Formatos não suportados geram erro explícito

    Raises:
        ConfigNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida as chaves reconhecidas da configuração efetiva.

    Retorna o próprio dicionário para permitir encadeamento.

    Raises:
        InvalidConfigValueError: Se alguma chave reconhecida tiver valor inválido.
    """
    engine_cfg = config.get("engine", {}) or {}
    if not isinstance(engine_cfg, dict):
        raise InvalidConfigValueError("`engine` deve ser um mapa")
    target = engine_cfg.get("default_target", DEFAULT_TARGET)
    if not isinstance(target, str) or not target.strip():
        raise InvalidConfigValueError("`engine.default_target` deve ser uma string não vazia")

    tasks_cfg = config.get("tasks", {}) or {}
    if not isinstance(tasks_cfg, dict):
        raise InvalidConfigValueError("`tasks` deve ser um mapa nome -> opções")

    for name, opts in tasks_cfg.items():
        opts = opts or {}
        if not isinstance(opts, dict):
            raise InvalidConfigValueError(f"`tasks.{name}` deve ser um mapa")
        if "enabled" in opts and not isinstance(opts["enabled"], bool):
            raise InvalidConfigValueError(f"`tasks.{name}.enabled` deve ser booleano")
        if "error_policy" in opts:
            try:
                ErrorPolicy.parse(opts["error_policy"])
            except ValueError as e:
                raise InvalidConfigValueError(f"`tasks.{name}.error_policy`: {e}") from e

    return config


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva de uma run.

    Política de resolução:
        - O arquivo de defaults é obrigatório
        - O arquivo local é opcional (ignorado se não existir)
        - Quando presente, o local sempre tem prioridade sobre defaults
        - A resolução utiliza `deep_merge` com política determinística
        - O resultado é validado por `validate_config`

    Args:
        defaults_path (str): Caminho para o arquivo de configuração base.
        local_path (Optional[str]): Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        ConfigNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        InvalidConfigValueError: Se uma chave reconhecida for inválida.
    """

    defaults = _load_file(Path(defaults_path))

    effective = defaults

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(defaults, _load_file(local_file))

    return validate_config(effective)


def default_target(config: Dict[str, Any]) -> str:
    engine_cfg = config.get("engine", {}) or {}
    return engine_cfg.get("default_target", DEFAULT_TARGET)
