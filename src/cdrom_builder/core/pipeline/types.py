# src/cdrom_builder/core/pipeline/types.py
"""
Vocabulário comum entre Steps e Engine.

    - StepKind   → papel do Step no pipeline (informativo)
    - StepStatus → como o `run` terminou
    - StepAction → o que o Engine deve fazer em seguida
    - StepResult → registro imutável de um `run`

Estados internos de um Step (ex.: STAGING, INVOKING no `create.cdrom`)
não aparecem aqui; o Engine só enxerga o status final.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class StepKind(str, Enum):
    """
    Papel do Step no pipeline de build.

        - PREPARE: prepara insumos (download, geração de arquivos de resposta)
        - BUILD: materializa artefatos (ex.: a ISO)
        - PROVISION: consome artefatos em máquinas virtuais
        - EXPORT: publica resultados

    O Engine não usa o kind para decidir nada.
    """
    PREPARE = "prepare"
    BUILD = "build"
    PROVISION = "provision"
    EXPORT = "export"


class StepStatus(str, Enum):
    """Status final de um `run`: SUCCESS, SKIPPED (config ou nada a fazer) ou FAILED."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class StepAction(str, Enum):
    """Sinal ao Engine após `run`: seguir para o próximo Step ou parar."""
    CONTINUE = "continue"
    HALT = "halt"


@dataclass(frozen=True)
class StepResult:
    """
    Registro imutável de um `run`.

    Campos:
        - step_id, kind, status: obrigatórios
        - summary: uma linha legível
        - metrics: contadores (ex.: `artifacts_staged`)
        - warnings: avisos não fatais; o Engine acrescenta os do RunContext
        - artifacts: referências publicadas (ex.: `{"cd_path": "/tmp/packer1.iso"}`)
        - payload: dados extras; em falhas traz `error` (CdromErrorPayload serializado)

    `action` não é armazenado: FAILED sinaliza HALT, o resto CONTINUE.
    """
    step_id: str
    kind: StepKind
    status: StepStatus
    summary: str
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    artifacts: Dict[str, Any] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def action(self) -> StepAction:
        if self.status == StepStatus.FAILED:
            return StepAction.HALT
        return StepAction.CONTINUE
