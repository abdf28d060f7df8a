# src/cdrom_builder/core/engine/__init__.py
"""
Engine do cdrom_builder.

O Engine é o orquestrador central do pipeline, responsável por:
    - validar a unicidade dos identificadores de Step
    - executar Steps na ordem declarada
    - interromper o pipeline no primeiro HALT
    - executar o cleanup de todos os Steps iniciados, em ordem reversa

Invariantes:
    - Cada Step é executado no máximo uma vez por run
    - Nenhum Step roda após um HALT
    - O resultado da execução reflete explicitamente o estado de cada Step
"""

from .engine import DuplicateStepIdError, Engine, RunResult

__all__ = ["DuplicateStepIdError", "Engine", "RunResult"]
