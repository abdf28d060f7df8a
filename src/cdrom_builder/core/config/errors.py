# src/cdrom_builder/core/config/errors.py
"""
Erros estruturais da configuração (arquivo ausente, formato, raiz, merge).

Opções inválidas de um Step específico (ex.: `files` que não é lista) não
são ConfigError: o Step as reporta como EngineConfigurationError.
"""


class ConfigError(Exception):
    """Base de todos os erros da camada de configuração."""


class DefaultsNotFoundError(ConfigError):
    """O arquivo de defaults (obrigatório) não existe."""


class UnsupportedConfigFormatError(ConfigError):
    """Extensão fora de `.yaml`, `.yml` e `.json`."""


class InvalidConfigRootTypeError(ConfigError):
    """A raiz do arquivo não é um mapeamento (ex.: uma lista YAML)."""


class ConfigTypeConflictError(ConfigError):
    """
    Tipos incompatíveis na mesma chave entre defaults e override.

    Exemplo:
        - defaults: {"steps": {"create.cdrom": {"label": "packer"}}}
        - local:    {"steps": "all"}
    """
