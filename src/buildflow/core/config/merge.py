# src/buildflow/core/config/merge.py
"""
Deep-merge da configuração do buildflow (defaults + overrides locais).

Uso típico: o arquivo local ajusta opções de uma task sem repetir o resto
do bloco, por exemplo `tasks.Publish.enabled: false` sobre um defaults que
também declara `tasks.Publish.error_policy`.

Política:
    - mapas (`engine`, `tasks`, `tasks.<nome>`) → merge recursivo por chave
    - listas (ex.: `projects` consumidos por tasks for-each) → substituídas inteiras
    - escalares (`enabled`, `error_policy`, `default_target`) → substituídos
    - chave declarada sem valor (`tasks.Test:` vazio, lido como None) aceita
      qualquer override
    - tipos diferentes na mesma chave → ConfigTypeConflictError

Nenhum input é mutado; o mesmo par (defaults, local) produz sempre a mesma
configuração.
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Aplica `override` (config local) sobre `base` (defaults).

    Args:
        base (Dict[str, Any]): Configuração de defaults.
        override (Dict[str, Any]): Overrides locais.

    Returns:
        Dict[str, Any]: Novo dicionário com a configuração efetiva.

    Raises:
        ConfigTypeConflictError: Se as raízes não forem dicts ou se uma chave
            mudar de tipo (ex.: `tasks.Test` mapa no defaults e string no local).
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # engine, tasks, tasks.<nome>
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        # listas nunca são concatenadas
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # None na base aceita qualquer override (chave declarada sem valor)
        if base_value is None:
            result[key] = deepcopy(override_value)
            continue

        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
