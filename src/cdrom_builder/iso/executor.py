"""
Execução síncrona do comando resolvido, com captura de saída e exit code.

Regras:
- Uma única invocação por chamada; nenhum retry.
- Falha ao iniciar o executável (não encontrado, sem permissão) é
  `LaunchError`.
- Exit code diferente de zero NÃO é exceção aqui: é um resultado normal
  que o chamador interpreta como falha da ferramenta.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Any, Callable

from cdrom_builder.core.exceptions import LaunchError

from .resolver import ResolvedCommand

Runner = Callable[..., Any]


@dataclass(frozen=True)
class ExecutionResult:
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def combined_output(self) -> str:
        return self.stdout + self.stderr


def execute(command: ResolvedCommand, *, runner: Runner = subprocess.run) -> ExecutionResult:
    """Executa `command` até o fim e devolve exit code + saídas capturadas.

    Raises:
        LaunchError: se o executável não puder ser iniciado.
    """
    try:
        completed = runner(
            command.argv,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        raise LaunchError(
            message=f"Não foi possível iniciar {command.executable}",
            details={
                "tool": command.kind.value,
                "executable": command.executable,
                "argv": command.argv,
                "exception": type(e).__name__,
                "exception_message": str(e),
            },
            hint="Verifique se a ferramenta está instalada e se o arquivo é executável.",
        ) from e

    return ExecutionResult(
        exit_code=int(completed.returncode),
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
