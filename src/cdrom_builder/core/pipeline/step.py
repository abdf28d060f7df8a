# src/cdrom_builder/core/pipeline/step.py
"""
Contrato canônico de Step do cdrom_builder.

Um Step é a menor unidade executável do pipeline, com ciclo de vida
`run` → `cleanup`.

Responsabilidades de um Step:
    - executar sua lógica uma única vez por run
    - interagir exclusivamente via RunContext
    - produzir um StepResult imutável (cujo `action` sinaliza CONTINUE/HALT)
    - desfazer, em `cleanup`, tudo o que criou

Princípios fundamentais:
    - Steps não conhecem o Engine
    - Steps não controlam ordem de execução
    - Conformidade é garantida por duck typing (@runtime_checkable)

Invariantes:
    - `run` é chamado no máximo uma vez por execução
    - `cleanup` pode ser chamado a qualquer momento, inclusive sem `run`
      prévio, e repetidamente, sem erro
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .context import RunContext
from .types import StepKind, StepResult


@runtime_checkable
class Step(Protocol):
    """
    Contrato canônico de um Step do cdrom_builder.

    Atributos obrigatórios:
        - id: identificador único e estável do Step
        - kind: classificação semântica do Step (`StepKind`)

    Decisões arquiteturais:
        - O protocolo não impõe herança, apenas conformidade estrutural
        - Erros de `cleanup` são best-effort e não alteram o resultado de `run`

    Limites explícitos:
        - Não define lógica de retry
        - Não decide políticas de execução (fail-fast, skip)
    """
    id: str
    kind: StepKind

    def run(self, ctx: RunContext) -> StepResult:
        """Executa a etapa uma única vez usando exclusivamente o RunContext."""
        ...

    def cleanup(self, ctx: RunContext) -> None:
        """Remove tudo o que `run` criou; idempotente e tolerante a estado parcial."""
        ...
