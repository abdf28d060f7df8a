# src/cdrom_builder/core/pipeline/__init__.py
"""
# Pipeline Core — cdrom_builder

Este pacote define os **contratos canônicos** e as **estruturas fundamentais**
que compõem um pipeline de build de imagens.

Um pipeline é uma **sequência explícita de Steps**, onde:
- cada Step declara identidade e tipo semântico
- a execução é coordenada exclusivamente pelo Engine
- o estado compartilhado é mediado pelo `RunContext`

## Componentes

- **types**
  - `StepStatus`: estados finais de execução
  - `StepAction`: sinal ao Engine (CONTINUE / HALT)
  - `StepKind`: classificação semântica de Steps
  - `StepResult`: resultado imutável da execução de um Step

- **step**
  - `Step` (Protocol): contrato `run` / `cleanup`

- **context**
  - `RunContext`: contexto de execução compartilhado (artefatos, erro, logs, warnings)

## Princípios Fundamentais

- Steps **não conhecem** o Engine
- Comunicação entre Steps ocorre **apenas via RunContext**
- Nenhuma decisão implícita ou silenciosa
"""

from .context import RunContext
from .step import Step
from .types import StepAction, StepKind, StepResult, StepStatus

__all__ = ["RunContext", "Step", "StepAction", "StepKind", "StepResult", "StepStatus"]
