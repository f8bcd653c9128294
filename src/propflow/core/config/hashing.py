# src/propflow/core/config/hashing.py
"""
Hashing canônico da configuração efetiva.

O hash identifica estruturalmente a configuração usada em uma run e é
anexado ao RunTrace. Serialização JSON canônica (chaves ordenadas,
separadores compactos, UTF-8) + SHA-256.
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash SHA-256 (64 caracteres hex) da configuração.

    Configurações estruturalmente equivalentes produzem o mesmo hash,
    independente da ordem original das chaves.

    Raises:
        TypeError: Se `config` não for dict.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical = json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
