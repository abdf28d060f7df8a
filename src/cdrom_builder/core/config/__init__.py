# src/cdrom_builder/core/config/__init__.py

"""
Camada de configuração do cdrom_builder.

Este pacote carrega e mescla a configuração de execução do pipeline
(defaults + overrides locais), em YAML ou JSON.

Princípios fundamentais:
    - Configuração não contém lógica de domínio
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .loader import load_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "deep_merge",
    "load_config",
]
