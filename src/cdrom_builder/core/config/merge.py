"""
Deep-merge de configuração (defaults ← local).

Regras por chave:
    - dict + dict       → merge recursivo
    - list no override  → substitui a lista inteira (a lista `files` de um
                          Step nunca é concatenada)
    - None em um lado   → o override vale como está (ex.: `output_path: null`)
    - tipos diferentes  → ConfigTypeConflictError
    - demais escalares  → o override vale

Nenhum argumento é mutado; o resultado não compartilha objetos com eles.
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def _merge_value(key: str, current: Any, incoming: Any) -> Any:
    if isinstance(current, dict) and isinstance(incoming, dict):
        return deep_merge(current, incoming)

    if isinstance(incoming, list) or current is None or incoming is None:
        return deepcopy(incoming)

    if type(current) is not type(incoming):
        raise ConfigTypeConflictError(
            f"Conflito de tipo na chave '{key}': "
            f"{type(current).__name__} (defaults) vs {type(incoming).__name__} (override)"
        )

    return deepcopy(incoming)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Devolve um novo dict com `override` aplicado sobre `base`.

    Raises:
        ConfigTypeConflictError: raiz não-dict ou tipos incompatíveis em
            alguma chave; nenhum resultado parcial é devolvido.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts na raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    merged: Dict[str, Any] = deepcopy(base)
    for key, incoming in override.items():
        if key in merged:
            merged[key] = _merge_value(key, merged[key], incoming)
        else:
            merged[key] = deepcopy(incoming)
    return merged
