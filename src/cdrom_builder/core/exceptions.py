"""
cdrom_builder — Canonical Exceptions (v1)

Este módulo define as exceções tipadas internas do cdrom_builder.

Objetivo:
- Permitir que Steps/Engine levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para CdromErrorPayload
- Evitar OSError/RuntimeError genéricos nas fronteiras críticas
  (staging, resolução de ferramenta, execução de processo)

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Nenhuma exceção é re-tentada internamente: todas são terminais para o run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CdromException(Exception):
    """Base class para exceções internas do cdrom_builder.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Staging
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StagingError(CdromException):
    """Arquivo de origem ilegível ou destino não gravável durante o staging."""


# ---------------------------------------------------------------------------
# Ferramenta externa
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolNotFoundError(CdromException):
    """Nenhuma ferramenta suportada de criação de ISO está disponível no host."""


@dataclass(frozen=True)
class LaunchError(CdromException):
    """A ferramenta resolvida não pôde sequer ser iniciada."""


@dataclass(frozen=True)
class ToolExecutionError(CdromException):
    """A ferramenta executou, mas terminou com exit code diferente de zero."""


@dataclass(frozen=True)
class UnsupportedPathError(CdromException):
    """Caminho nativo sem representação na sintaxe de destino."""


# ---------------------------------------------------------------------------
# Engine / Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EngineConfigurationError(CdromException):
    """Configuração inválida ou inconsistente para execução."""
