# src/buildflow/core/config/__init__.py

"""
Camada de configuração do buildflow.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Validação das chaves reconhecidas (engine, tasks)
    - Geração de hash canônico para o run log

Princípios fundamentais:
    - Configuração não contém lógica de build
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não executa tasks
    - Não interage com Engine diretamente (o Engine lê via RunContext)
"""

from .errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import DEFAULT_TARGET, default_target, load_config, validate_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigTypeConflictError",
    "InvalidConfigRootTypeError",
    "InvalidConfigValueError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "DEFAULT_TARGET",
    "default_target",
    "load_config",
    "validate_config",
    "deep_merge",
]
