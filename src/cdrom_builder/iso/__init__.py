"""
Blocos de construção da criação de imagens ISO.

    - paths    → tradução de caminhos nativos para a sintaxe da ferramenta
    - host     → plataforma + busca de executáveis
    - resolver → escolha da ferramenta e montagem do comando (puro)
    - executor → execução do comando com captura de saída
    - tracker  → registro dos arquivos preparados no staging

A codificação ISO9660 em si é delegada integralmente à ferramenta externa.
"""

from .executor import ExecutionResult, execute
from .host import HostEnvironment
from .paths import PathSyntax, PathTranslator, to_posix_emulation
from .resolver import DEFAULT_LABEL, ResolvedCommand, ToolKind, resolve_iso_command
from .tracker import ArtifactTracker, StagedArtifact

__all__ = [
    "ArtifactTracker",
    "DEFAULT_LABEL",
    "ExecutionResult",
    "HostEnvironment",
    "PathSyntax",
    "PathTranslator",
    "ResolvedCommand",
    "StagedArtifact",
    "ToolKind",
    "execute",
    "resolve_iso_command",
    "to_posix_emulation",
]
