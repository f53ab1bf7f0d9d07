# src/buildflow/core/config/hashing.py
"""
Hashing canônico de configuração do buildflow.

O hash representa a **identidade estrutural** da configuração efetiva de uma
run e é gravado no run log para rastreabilidade.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256 (64 caracteres hexadecimais)
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico da configuração efetiva.

    Invariantes:
        - Configurações estruturalmente equivalentes produzem o mesmo hash
        - O hash independe da ordem original das chaves
        - Nenhuma mutação ocorre sobre o input

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
