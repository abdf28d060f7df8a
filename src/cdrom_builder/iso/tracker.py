"""Registro dos arquivos efetivamente copiados para o diretório de staging."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass(frozen=True)
class StagedArtifact:
    requested: str
    staged: Path


@dataclass
class ArtifactTracker:
    """
    Lista ordenada de (caminho pedido → caminho no staging).

    Só registra cópias concluídas: se o staging aborta no meio, o tracker
    reflete exatamente o que foi copiado antes da falha.

    Entradas duplicadas não são deduplicadas; se duas entradas colidem no
    mesmo nome de destino, ambas ficam registradas e o arquivo no disco é
    o da última cópia.
    """

    _entries: List[StagedArtifact] = field(default_factory=list, init=False, repr=False)

    def record(self, requested: str, staged: Path) -> None:
        self._entries.append(StagedArtifact(requested=requested, staged=staged))

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[StagedArtifact]:
        return list(self._entries)

    def staged_paths(self) -> List[Path]:
        return [e.staged for e in self._entries]

    def as_mapping(self) -> Dict[str, str]:
        return {e.requested: str(e.staged) for e in self._entries}

    def clear(self) -> None:
        self._entries.clear()
