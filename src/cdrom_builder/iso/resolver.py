"""
Resolução da ferramenta de criação de ISO disponível no host.

Dado o caminho da imagem de saída, o diretório de staging e o host, este
módulo escolhe a ferramenta (primeira disponível vence) e monta o vetor de
argumentos exato para invocá-la.

Ordem de resolução:
    1. oscdimg (Windows nativo): caminhos nativos
    2. xorriso do MSYS2/Cygwin (detectado pelo `cygpath` no PATH de um host
       Windows): executável dentro da árvore da camada de emulação
       (`...\\usr\\bin\\xorriso.exe`), caminhos traduzidos para a sintaxe
       POSIX e passados como os dois últimos argumentos: destino, depois origem
    3. hdiutil makehybrid (macOS): ISO9660 + Joliet
    4. ferramenta Linux (xorriso, mkisofs, genisoimage): Rock Ridge + Joliet

Invariantes:
    - A resolução é função pura de (caminhos, host, label): nenhum processo
      é lançado e nenhum arquivo é tocado
    - `ResolvedCommand` é imutável
    - Cada `ToolKind` é dono da sua própria construção de argumentos
"""

from __future__ import annotations

import ntpath
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from cdrom_builder.core.exceptions import ToolNotFoundError

from .host import HostEnvironment
from .paths import PathLike, PathSyntax, PathTranslator

DEFAULT_LABEL = "packer"


class ToolKind(str, Enum):
    """Ferramenta externa de autoria de ISO selecionada para o host."""
    OSCDIMG = "oscdimg"
    MSYS_XORRISO = "msys_xorriso"
    HDIUTIL = "hdiutil"
    XORRISO = "xorriso"
    MKISOFS = "mkisofs"
    GENISOIMAGE = "genisoimage"

    @property
    def path_syntax(self) -> PathSyntax:
        if self is ToolKind.MSYS_XORRISO:
            return PathSyntax.POSIX_EMULATION
        return PathSyntax.NATIVE

    def build_args(self, *, label: str, source: str, dest: str) -> List[str]:
        return _ARGUMENT_BUILDERS[self](label, source, dest)


@dataclass(frozen=True)
class ResolvedCommand:
    """Executável + vetor de argumentos; sem estado oculto."""

    kind: ToolKind
    executable: str
    args: Tuple[str, ...]

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]


# ---------------------------------------------------------------------------
# Construção de argumentos (uma função por ToolKind)
# ---------------------------------------------------------------------------

def _oscdimg_args(label: str, source: str, dest: str) -> List[str]:
    # -j1: Joliet + ISO9660; -o: dedup de arquivos; -m: ignora limite de tamanho
    return ["-j1", "-o", "-m", f"-l{label}", source, dest]


def _xorriso_args(label: str, source: str, dest: str) -> List[str]:
    return ["-as", "genisoimage", "-rock", "-joliet", "-volid", label, "-output", dest, source]


def _hdiutil_args(label: str, source: str, dest: str) -> List[str]:
    return [
        "makehybrid",
        "-o", dest,
        "-hfs",
        "-joliet",
        "-iso",
        "-default-volume-name", label,
        source,
    ]


def _mkisofs_args(label: str, source: str, dest: str) -> List[str]:
    return ["-rock", "-joliet", "-volid", label, "-o", dest, source]


_ARGUMENT_BUILDERS: Dict[ToolKind, Callable[[str, str, str], List[str]]] = {
    ToolKind.OSCDIMG: _oscdimg_args,
    ToolKind.MSYS_XORRISO: _xorriso_args,
    ToolKind.HDIUTIL: _hdiutil_args,
    ToolKind.XORRISO: _xorriso_args,
    ToolKind.MKISOFS: _mkisofs_args,
    ToolKind.GENISOIMAGE: _mkisofs_args,
}


# ---------------------------------------------------------------------------
# Probe de capacidades (ordem = prioridade)
# ---------------------------------------------------------------------------

def _probe_msys_xorriso(host: HostEnvironment) -> Optional[str]:
    if not host.is_windows:
        return None
    cygpath = host.lookup("cygpath")
    if not cygpath:
        return None
    # o xorriso do MSYS2 não está no PATH do sistema, e sim ao lado do cygpath
    return ntpath.join(ntpath.dirname(cygpath), "xorriso.exe")


def _probe_on_path(name: str) -> Callable[[HostEnvironment], Optional[str]]:
    def probe(host: HostEnvironment) -> Optional[str]:
        return host.lookup(name)
    return probe


_PROBE_ORDER: List[Tuple[ToolKind, Callable[[HostEnvironment], Optional[str]]]] = [
    (ToolKind.OSCDIMG, _probe_on_path("oscdimg")),
    (ToolKind.MSYS_XORRISO, _probe_msys_xorriso),
    (ToolKind.HDIUTIL, _probe_on_path("hdiutil")),
    (ToolKind.XORRISO, _probe_on_path("xorriso")),
    (ToolKind.MKISOFS, _probe_on_path("mkisofs")),
    (ToolKind.GENISOIMAGE, _probe_on_path("genisoimage")),
]

SUPPORTED_TOOLS = ["oscdimg", "xorriso", "hdiutil", "mkisofs", "genisoimage"]


def resolve_iso_command(
    output_path: PathLike,
    staging_dir: PathLike,
    host: Optional[HostEnvironment] = None,
    *,
    label: str = DEFAULT_LABEL,
) -> ResolvedCommand:
    """
    Resolve a ferramenta disponível e monta o comando de criação da ISO.

    Args:
        output_path: caminho nativo da imagem a ser criada.
        staging_dir: caminho nativo do diretório com os arquivos preparados.
        host: capacidades do host (padrão: `HostEnvironment.current()`).
        label: volume label gravado na imagem.

    Returns:
        ResolvedCommand: comando imutável pronto para o Executor.

    Raises:
        ToolNotFoundError: se nenhuma ferramenta suportada estiver disponível.
        UnsupportedPathError: se um caminho não puder ser traduzido para a
            sintaxe exigida pela ferramenta.
    """
    host = host or HostEnvironment.current()
    dest = os.fspath(output_path)
    source = os.fspath(staging_dir)

    for kind, probe in _PROBE_ORDER:
        executable = probe(host)
        if not executable:
            continue

        translator = PathTranslator(kind.path_syntax)
        args = kind.build_args(
            label=label,
            source=translator.translate(source),
            dest=translator.translate(dest),
        )
        return ResolvedCommand(kind=kind, executable=executable, args=tuple(args))

    raise ToolNotFoundError(
        message="Nenhuma ferramenta de criação de ISO encontrada no host",
        details={
            "candidates": list(SUPPORTED_TOOLS),
            "platform": host.platform,
        },
        hint=(
            "Instale uma das ferramentas suportadas (" + ", ".join(SUPPORTED_TOOLS) + ") "
            "e garanta que ela está no PATH."
        ),
    )
