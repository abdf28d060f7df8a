"""Descrição do host usada pelo resolver: plataforma + busca de executáveis no PATH."""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass
from typing import Callable, Optional


def _normalize_platform(raw: str) -> str:
    if raw == "win32":
        return "windows"
    if raw.startswith("linux"):
        return "linux"
    return raw


@dataclass(frozen=True)
class HostEnvironment:
    """
    Capacidades do host relevantes para a escolha da ferramenta de ISO.

    Campos:
        - platform: "windows", "darwin", "linux" (ou o valor cru de sys.platform)
        - which: função de busca de executáveis (padrão: shutil.which)

    Injetar `which` permite testar todos os ramos do resolver em qualquer
    sistema operacional, sem lançar processos.
    """

    platform: str
    which: Callable[[str], Optional[str]] = shutil.which

    @classmethod
    def current(cls) -> "HostEnvironment":
        return cls(platform=_normalize_platform(sys.platform))

    @property
    def is_windows(self) -> bool:
        return self.platform == "windows"

    def lookup(self, name: str) -> Optional[str]:
        return self.which(name)
