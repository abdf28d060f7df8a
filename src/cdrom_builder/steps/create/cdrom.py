"""Step canônico: create.cdrom (v1).

Materializa uma imagem ISO9660 ("CD") a partir de arquivos de entrada,
para consumo por Steps posteriores (ex.: anexar a ISO a uma VM).

Fluxo de `run`:
    INITIAL → STAGING → INVOKING → PUBLISHED (sucesso)
    INITIAL/STAGING/INVOKING → FAILED (falha terminal)

    1. STAGING: cria um diretório de staging novo e copia as entradas, em
       ordem. O primeiro erro de filesystem aborta o staging (entradas
       restantes não são tentadas); o tracker mantém apenas o que foi
       copiado antes da falha.
    2. INVOKING: resolve a ferramenta do host e executa uma única vez.
    3. PUBLISHED: publica o caminho absoluto da imagem em `cd_path`.

Toda falha é escrita uma única vez no RunContext e o Step sinaliza HALT.

`cleanup` pode ser chamado em qualquer estado (inclusive sem `run`) e
repetidas vezes: remove a imagem produzida e o staging; alvos ausentes
não são erro, falhas de remoção viram warnings.

Limites explícitos (v1):
- NÃO escreve ISO9660 por conta própria (delegado à ferramenta externa)
- NÃO re-tenta invocações que falharam
"""

from __future__ import annotations

import glob
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from cdrom_builder.core.errors import payload_from_exception
from cdrom_builder.core.exceptions import (
    CdromException,
    EngineConfigurationError,
    StagingError,
    ToolExecutionError,
)
from cdrom_builder.core.pipeline.context import RunContext
from cdrom_builder.core.pipeline.step import Step
from cdrom_builder.core.pipeline.types import StepKind, StepResult, StepStatus
from cdrom_builder.iso.executor import ExecutionResult, Runner, execute
from cdrom_builder.iso.host import HostEnvironment
from cdrom_builder.iso.resolver import DEFAULT_LABEL, ResolvedCommand, resolve_iso_command
from cdrom_builder.iso.tracker import ArtifactTracker

CD_PATH_KEY = "cd_path"

# ISO 9660 limita o volume label a 32 caracteres
_MAX_LABEL_LEN = 32
_GLOB_CHARS = frozenset("*?[")

Resolver = Callable[..., ResolvedCommand]


class CdromState(str, Enum):
    INITIAL = "initial"
    STAGING = "staging"
    INVOKING = "invoking"
    PUBLISHED = "published"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def _config_error(key: str, expected: str, received: Any) -> EngineConfigurationError:
    return EngineConfigurationError(
        message=f"Opção inválida em steps.create.cdrom.{key}",
        details={"key": key, "expected": expected, "received": type(received).__name__},
        hint=f"Declare `{key}` como {expected}.",
    )


@dataclass(frozen=True)
class CreateCdromConfig:
    """Opções do Step, validadas a partir de `config["steps"]["create.cdrom"]`."""

    files: Tuple[str, ...] = ()
    content: Mapping[str, str] = field(default_factory=dict)
    label: str = DEFAULT_LABEL
    output_path: Optional[str] = None
    skip_when_empty: bool = False

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "CreateCdromConfig":
        raw = raw or {}
        if not isinstance(raw, Mapping):
            raise _config_error("<root>", "mapping", raw)

        files = raw.get("files") or []
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise _config_error("files", "lista de strings", files)

        content = raw.get("content") or {}
        if not isinstance(content, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in content.items()
        ):
            raise _config_error("content", "mapa de nome → texto", content)

        label = raw.get("label") or DEFAULT_LABEL
        if not isinstance(label, str):
            raise _config_error("label", "string", label)

        output_path = raw.get("output_path")
        if output_path is not None and not isinstance(output_path, str):
            raise _config_error("output_path", "string ou null", output_path)

        skip_when_empty = raw.get("skip_when_empty", False)
        if not isinstance(skip_when_empty, bool):
            raise _config_error("skip_when_empty", "booleano", skip_when_empty)

        return cls(
            files=tuple(files),
            content=dict(content),
            label=label,
            output_path=output_path,
            skip_when_empty=skip_when_empty,
        )


# ---------------------------------------------------------------------------
# Helpers de staging
# ---------------------------------------------------------------------------

def _expand(requested: str) -> List[Path]:
    # um arquivo existente vale literalmente, mesmo com `[`, `*` ou `?` no nome
    if not _GLOB_CHARS.intersection(requested) or Path(requested).exists():
        return [Path(requested)]

    matches = sorted(glob.glob(requested))
    if not matches:
        raise StagingError(
            message=f"Nenhum arquivo corresponde ao padrão: {requested}",
            details={"requested": requested},
            hint="Ajuste o padrão em steps.create.cdrom.files.",
        )
    return [Path(m) for m in matches]


def _content_target(root: Path, name: str) -> Path:
    rel = PurePosixPath(name.replace("\\", "/"))
    if not name or rel.is_absolute() or ".." in rel.parts:
        raise StagingError(
            message=f"Nome inválido para conteúdo inline: {name!r}",
            details={"requested": name},
            hint="Use um caminho relativo sem '..'.",
        )
    return root.joinpath(*rel.parts)


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------

class CreateCdromStep(Step):
    """create.cdrom: prepara arquivos, cria a ISO com a ferramenta do host e publica `cd_path`."""

    kind = StepKind.BUILD

    def __init__(
        self,
        files: Optional[Sequence[str]] = None,
        *,
        content: Optional[Mapping[str, str]] = None,
        label: str = DEFAULT_LABEL,
        output_path: Optional[str] = None,
        skip_when_empty: bool = False,
        step_id: str = "create.cdrom",
        host: Optional[HostEnvironment] = None,
        runner: Runner = subprocess.run,
        resolver: Resolver = resolve_iso_command,
    ) -> None:
        self.id = step_id
        self.files: List[str] = list(files or [])
        self.content: Dict[str, str] = dict(content or {})
        self.label = (label or DEFAULT_LABEL)[:_MAX_LABEL_LEN]
        self.output_path = output_path
        self.skip_when_empty = skip_when_empty

        self._host = host
        self._runner = runner
        self._resolver = resolver

        self.state = CdromState.INITIAL
        self.tracker = ArtifactTracker()
        self.staging_dir: Optional[Path] = None
        self.cd_path: Optional[Path] = None
        self.command: Optional[ResolvedCommand] = None
        self.execution: Optional[ExecutionResult] = None
        self.cleaned_up = False
        self._image_may_exist = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any], *, step_id: str = "create.cdrom", **kwargs: Any) -> "CreateCdromStep":
        steps_cfg = (config or {}).get("steps") or {}
        opts = CreateCdromConfig.from_mapping(steps_cfg.get(step_id))
        return cls(
            list(opts.files),
            content=opts.content,
            label=opts.label,
            output_path=opts.output_path,
            skip_when_empty=opts.skip_when_empty,
            step_id=step_id,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------

    def run(self, ctx: RunContext) -> StepResult:
        if self.state != CdromState.INITIAL:
            raise RuntimeError(f"{self.id}: run() já foi chamado (estado: {self.state.value})")

        if self.skip_when_empty and not self.files and not self.content:
            ctx.log(step_id=self.id, level="info", message="nothing to put on CD, skipping")
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SKIPPED,
                summary="no files or content configured",
                payload={"skipped": True},
            )

        ctx.log(step_id=self.id, level="info", message="Creating CD disk...", label=self.label)

        try:
            staging = self._stage(ctx)
            self._invoke(ctx, staging)
        except CdromException as exc:
            return self._fail(ctx, exc)

        self.state = CdromState.PUBLISHED
        cd_path = str(self.cd_path)
        ctx.set_artifact(CD_PATH_KEY, cd_path)
        ctx.log(step_id=self.id, level="info", message="CD created", cd_path=cd_path)

        return StepResult(
            step_id=self.id,
            kind=self.kind,
            status=StepStatus.SUCCESS,
            summary="create.cdrom completed",
            metrics=self._metrics(),
            artifacts={CD_PATH_KEY: cd_path},
            payload={
                "tool": self.command.kind.value if self.command else None,
                "argv": self.command.argv if self.command else [],
                "staging_dir": str(self.staging_dir),
                "staged": self.tracker.as_mapping(),
            },
        )

    def _metrics(self) -> Dict[str, Any]:
        return {
            "files_requested": len(self.files),
            "content_entries": len(self.content),
            "artifacts_staged": len(self.tracker),
        }

    def _fail(self, ctx: RunContext, exc: CdromException) -> StepResult:
        self.state = CdromState.FAILED
        error = payload_from_exception(exc, step=self.id)
        ctx.set_error(error)
        ctx.log(
            step_id=self.id,
            level="error",
            message=error.message,
            error_type=error.type,
            artifacts_staged=len(self.tracker),
        )
        return StepResult(
            step_id=self.id,
            kind=self.kind,
            status=StepStatus.FAILED,
            summary=error.message,
            metrics=self._metrics(),
            payload={"error": error.to_dict()},
        )

    # ------------------------------------------------------------------
    # STAGING
    # ------------------------------------------------------------------

    def _stage(self, ctx: RunContext) -> Path:
        self.state = CdromState.STAGING
        try:
            staging = Path(tempfile.mkdtemp(prefix="packer_to_cdrom")).absolute()
        except OSError as e:
            raise self._staging_error("<staging directory>", Path(tempfile.gettempdir()), e) from e
        self.staging_dir = staging
        ctx.log(step_id=self.id, level="debug", message="staging directory created", path=str(staging))

        for requested in self.files:
            for source in _expand(requested):
                self._stage_path(ctx, staging, requested, source)

        for name, text in self.content.items():
            target = _content_target(staging, name)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(text, encoding="utf-8")
            except OSError as e:
                raise self._staging_error(f"content:{name}", target, e) from e
            self.tracker.record(f"content:{name}", target)

        ctx.log(step_id=self.id, level="info", message="files staged", count=len(self.tracker))
        return staging

    def _stage_path(self, ctx: RunContext, staging: Path, requested: str, source: Path) -> None:
        if source.is_dir():
            root = staging / source.resolve().name
            for child in sorted(source.rglob("*")):
                if child.is_file():
                    self._copy(ctx, requested, child, root / child.relative_to(source))
            return

        self._copy(ctx, requested, source, staging / source.name)

    def _copy(self, ctx: RunContext, requested: str, source: Path, dest: Path) -> None:
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        except OSError as e:
            raise self._staging_error(requested, source, e) from e
        self.tracker.record(requested, dest)
        ctx.log(step_id=self.id, level="debug", message="file staged", source=str(source), staged=str(dest))

    def _staging_error(self, requested: str, source: Path, exc: OSError) -> StagingError:
        return StagingError(
            message=f"Falha ao copiar '{requested}' para o diretório de staging",
            details={
                "requested": requested,
                "source": str(source),
                "artifacts_staged": len(self.tracker),
                "exception": type(exc).__name__,
                "exception_message": str(exc),
            },
            hint="Verifique se o arquivo existe e é legível.",
        )

    # ------------------------------------------------------------------
    # INVOKING
    # ------------------------------------------------------------------

    def _reserve_output(self) -> Path:
        if self.output_path:
            return Path(self.output_path).absolute()
        try:
            fd, name = tempfile.mkstemp(prefix="packer", suffix=".iso")
            os.close(fd)
            # a ferramenta cria o arquivo; só o nome é reservado
            os.remove(name)
        except OSError as e:
            raise StagingError(
                message="Falha ao reservar o caminho da imagem ISO",
                details={
                    "directory": tempfile.gettempdir(),
                    "exception": type(e).__name__,
                    "exception_message": str(e),
                },
                hint="Verifique se o diretório temporário existe e é gravável, ou defina `output_path`.",
            ) from e
        return Path(name).absolute()

    def _invoke(self, ctx: RunContext, staging: Path) -> None:
        self.state = CdromState.INVOKING
        self.cd_path = self._reserve_output()

        self.command = self._resolver(
            str(self.cd_path),
            str(staging),
            self._host,
            label=self.label,
        )
        ctx.log(
            step_id=self.id,
            level="info",
            message="ISO tool resolved",
            tool=self.command.kind.value,
            argv=self.command.argv,
        )

        self._image_may_exist = True
        self.execution = execute(self.command, runner=self._runner)
        ctx.log(step_id=self.id, level="debug", message="ISO tool finished", exit_code=self.execution.exit_code)

        if not self.execution.ok:
            raise ToolExecutionError(
                message=f"Erro criando CD: {self.command.kind.value} terminou com código {self.execution.exit_code}",
                details={
                    "tool": self.command.kind.value,
                    "argv": self.command.argv,
                    "exit_code": self.execution.exit_code,
                    "output": self.execution.combined_output,
                },
                hint="Consulte `output` para a saída capturada da ferramenta.",
            )

    # ------------------------------------------------------------------
    # cleanup
    # ------------------------------------------------------------------

    def cleanup(self, ctx: RunContext) -> None:
        # alvos cuja remoção falhou continuam registrados para a próxima chamada
        if self._image_may_exist and self.cd_path is not None:
            if self._remove(ctx, self.cd_path, what="CD image"):
                self._image_may_exist = False
        if self.staging_dir is not None:
            if self._remove(ctx, self.staging_dir, what="staging directory"):
                self.staging_dir = None
                self.tracker.clear()

        self.cleaned_up = self.staging_dir is None and not self._image_may_exist

    def _remove(self, ctx: RunContext, path: Path, *, what: str) -> bool:
        """Remove `path`; True se o alvo não existe mais ao final."""
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            message = f"Falha ao remover {what} {path}: {e}"
            ctx.add_warning(step_id=self.id, message=message)
            ctx.log(step_id=self.id, level="warning", message=message)
            return False
        ctx.log(step_id=self.id, level="info", message=f"{what} removed", path=str(path))
        return True
