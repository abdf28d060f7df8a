# src/cdrom_builder/core/config/loader.py
"""
Carregamento da configuração de execução do cdrom_builder.

Fontes, em ordem de prioridade crescente:
    1. arquivo de defaults (obrigatório), ex.: `config/defaults.yaml`
    2. arquivo local (opcional), ex.: `config/local.yaml`

O resultado é um `dict` puro; as opções do Step `create.cdrom` ficam em
`config["steps"]["create.cdrom"]` e são validadas pelo próprio Step
(`CreateCdromConfig.from_mapping`), não aqui.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

PathArg = Union[str, "os.PathLike[str]"]


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _parse_json(text: str) -> Any:
    return json.loads(text) if text.strip() else None


_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".json": _parse_json,
}


def _read_mapping(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo YAML/JSON e exige um mapeamento na raiz.

    Arquivo vazio vale `{}`.

    Raises:
        DefaultsNotFoundError: arquivo inexistente.
        UnsupportedConfigFormatError: extensão fora de `.yaml`, `.yml`, `.json`.
        InvalidConfigRootTypeError: raiz que não é mapeamento (ex.: lista).
    """
    if not path.is_file():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix or '<sem extensão>'} (use YAML ou JSON)"
        )

    data = parser(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"A raiz de {path.name} precisa ser um mapeamento, recebido: {type(data).__name__}"
        )
    return data


def load_config(
    *,
    defaults_path: PathArg,
    local_path: Optional[PathArg] = None,
) -> Dict[str, Any]:
    """
    Resolve a configuração efetiva: defaults, sobrepostos pelo arquivo local.

    Um `local_path` que não existe é ignorado (máquinas sem override local);
    já a ausência dos defaults é erro.

    Args:
        defaults_path: arquivo base, obrigatório.
        local_path: arquivo de override, opcional.

    Returns:
        Dict[str, Any]: configuração final; os arquivos de entrada nunca são
        mutados.

    Raises:
        DefaultsNotFoundError, UnsupportedConfigFormatError,
        InvalidConfigRootTypeError: ver `_read_mapping`.
        ConfigTypeConflictError: tipos incompatíveis entre defaults e local.
    """
    defaults = _read_mapping(Path(defaults_path))

    if local_path is None or not Path(local_path).exists():
        return defaults

    return deep_merge(defaults, _read_mapping(Path(local_path)))
