"""
cdrom_builder — Canonical Error Structures (v1)

Toda falha terminal de uma run vira um CdromErrorPayload: um código estável
do catálogo abaixo, uma mensagem curta, `details` estruturados (ex.: a saída
capturada da ferramenta de ISO) e um `hint` para o operador.

Um erro é escrito uma única vez no RunContext; nenhuma recuperação parcial
é tentada.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional

from .exceptions import (
    CdromException,
    EngineConfigurationError,
    LaunchError,
    StagingError,
    ToolExecutionError,
    ToolNotFoundError,
    UnsupportedPathError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CdromErrorPayload:
    """
    Payload canônico de erro do cdrom_builder.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
      (ex.: saída capturada da ferramenta, arquivo que falhou no staging)
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Staging
CDROM_STAGING_FAILED = "CDROM_STAGING_FAILED"

# Ferramenta externa
CDROM_TOOL_NOT_FOUND = "CDROM_TOOL_NOT_FOUND"
CDROM_LAUNCH_FAILED = "CDROM_LAUNCH_FAILED"
CDROM_TOOL_FAILED = "CDROM_TOOL_FAILED"
CDROM_UNSUPPORTED_PATH = "CDROM_UNSUPPORTED_PATH"

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


_EXCEPTION_CODES = {
    StagingError: CDROM_STAGING_FAILED,
    ToolNotFoundError: CDROM_TOOL_NOT_FOUND,
    LaunchError: CDROM_LAUNCH_FAILED,
    ToolExecutionError: CDROM_TOOL_FAILED,
    UnsupportedPathError: CDROM_UNSUPPORTED_PATH,
    EngineConfigurationError: ENGINE_CONFIGURATION_ERROR,
}


def payload_from_exception(exc: Exception, *, step: Optional[str] = None) -> CdromErrorPayload:
    """Converte uma exceção em CdromErrorPayload (sem stack trace).

    Regras:
    - CdromException: código estável do catálogo + message/details/hint da exceção.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR.
    """
    if isinstance(exc, CdromException):
        code = _EXCEPTION_CODES.get(type(exc), type(exc).__name__)
        details = dict(exc.details or {})
        if step is not None:
            details.setdefault("step", step)
        return CdromErrorPayload(
            type=code,
            message=exc.message or "Erro de execução",
            details=details,
            hint=exc.hint,
        )

    return engine_execution_error(
        step=step,
        exc_type=exc.__class__.__name__,
        exc_message=str(exc) or None,
    )


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def engine_execution_error(
    *,
    step: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o log de eventos do run para diagnosticar a falha. Nenhum fallback é aplicado automaticamente.",
) -> CdromErrorPayload:
    return CdromErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message="Falha inesperada durante a execução do pipeline",
        details={
            "step": step,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do pipeline",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise a configuração do run/steps antes de reexecutar.",
) -> CdromErrorPayload:
    return CdromErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
    )
