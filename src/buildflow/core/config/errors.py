# src/buildflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do buildflow.

As exceções aqui definidas representam **violações estruturais explícitas**
da configuração de uma run, e não falhas de tasks.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de execução de task

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de Engine, Pipeline ou RunContext
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do buildflow.

    Permite captura genérica de erros de configuração e distinção clara
    entre falhas estruturais e falhas de execução.
    """


class ConfigNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório quando informado
        - Não tenta inferir ou criar defaults automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando a extensão do arquivo não é suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"tasks": {"Publish": {"enabled": true}}}
        - override: {"tasks": "Publish"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidConfigValueError(ConfigError):
    """
    Exceção levantada quando uma chave reconhecida possui valor inválido.

    Exemplos:
        - `tasks.<nome>.enabled` que não é booleano
        - `tasks.<nome>.error_policy` fora de {stop-on-error, defer-on-error}
        - `engine.default_target` vazio
    """
