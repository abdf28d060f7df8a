"""
Tradução de caminhos nativos para a sintaxe esperada pela ferramenta externa.

Ferramentas que rodam dentro de uma camada de emulação POSIX em host
Windows (MSYS2/Cygwin) não entendem `C:\\Windows\\Temp`; esperam
`/c/Windows/Temp`. Este módulo oferece duas derivações equivalentes para
caminhos bem formados:

    - `PathTranslator.translate`: regra puramente sintática, sem acesso a
      filesystem ou processo (usada pelo resolver, que precisa ser puro)
    - `PathTranslator.translate_with_utility`: delega ao utilitário local
      de tradução (`cygpath -u`)

Regras da sintaxe POSIX-emulation:
    - `X:` (letra de drive) → `/x`
    - todo separador vira `/`; separadores repetidos colapsam
    - UNC `\\\\server\\share\\x` → `//server/share/x`
    - drive-relative (`C:foo`) ou drive não-letra → UnsupportedPathError
"""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from cdrom_builder.core.exceptions import LaunchError, UnsupportedPathError

PathLike = Union[str, "os.PathLike[str]"]

_DRIVE_RE = re.compile(r"^(?P<drive>[^/]*):(?P<rest>.*)$")
_REPEATED_SEP_RE = re.compile(r"/{2,}")


class PathSyntax(str, Enum):
    """Sintaxe de caminho esperada pelo ambiente de execução da ferramenta."""
    NATIVE = "native"
    POSIX_EMULATION = "posix_emulation"


def _unsupported(path: str, reason: str) -> UnsupportedPathError:
    return UnsupportedPathError(
        message=f"Caminho sem representação POSIX: {path}",
        details={"path": path, "reason": reason},
        hint="Use um caminho absoluto com letra de drive (ex.: C:\\dir) ou um caminho UNC.",
    )


def to_posix_emulation(native_path: PathLike) -> str:
    """Converte um caminho nativo Windows para a sintaxe MSYS2/Cygwin (regra sintática)."""
    path = os.fspath(native_path)
    if not path:
        raise _unsupported(path, "empty path")

    p = path.replace("\\", "/")

    if p.startswith("//"):
        return "//" + _REPEATED_SEP_RE.sub("/", p[2:])

    m = _DRIVE_RE.match(p)
    if m is None:
        return _REPEATED_SEP_RE.sub("/", p)

    drive, rest = m.group("drive"), m.group("rest")
    if len(drive) != 1 or not ("a" <= drive.lower() <= "z"):
        raise _unsupported(path, f"no mapping rule for drive '{drive}:'")
    if rest and not rest.startswith("/"):
        raise _unsupported(path, "drive-relative path")

    return _REPEATED_SEP_RE.sub("/", f"/{drive.lower()}{rest}")


@dataclass(frozen=True)
class PathTranslator:
    """Traduz caminhos nativos para a sintaxe `syntax` (NATIVE devolve o caminho intacto)."""

    syntax: PathSyntax = PathSyntax.POSIX_EMULATION

    def translate(self, native_path: PathLike) -> str:
        if self.syntax == PathSyntax.NATIVE:
            return os.fspath(native_path)
        return to_posix_emulation(native_path)

    def translate_with_utility(
        self,
        native_path: PathLike,
        *,
        utility: str,
        runner: Callable[..., Any] = subprocess.run,
    ) -> str:
        """Traduz invocando o utilitário local (`<utility> -u <path>`).

        Raises:
            LaunchError: se o utilitário não puder ser iniciado.
            UnsupportedPathError: se o utilitário rejeitar o caminho.
        """
        path = os.fspath(native_path)
        if self.syntax == PathSyntax.NATIVE:
            return path

        try:
            completed = runner(
                [utility, "-u", path],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise LaunchError(
                message=f"Não foi possível iniciar o utilitário de tradução: {utility}",
                details={
                    "executable": utility,
                    "exception": type(e).__name__,
                    "exception_message": str(e),
                },
            ) from e

        if completed.returncode != 0:
            raise _unsupported(path, (completed.stderr or "").strip() or f"exit code {completed.returncode}")

        return (completed.stdout or "").strip()
