"""
Fixtures compartilhados para testes do cdrom_builder.

Este módulo define fixtures reutilizáveis que fornecem:
- configuração mínima e determinística
- contexto de execução controlado (RunContext)
- Steps dummy para testes do Engine
- host falso (plataforma + ferramentas "instaladas")
- runner de processo falso, que simula a ferramenta de ISO

O objetivo destas fixtures é permitir testes do Step e do Engine sem
lançar nenhuma ferramenta real de criação de ISO.

Decisões arquiteturais:
    - O host é injetado via `HostEnvironment(which=...)`, sem tocar no PATH
    - O runner falso grava um arquivo de imagem no destino do comando,
      como a ferramenta real faria, e registra cada chamada
    - Steps dummy utilizam duck typing em vez de herança

Limites explícitos:
    - Não substituem o teste de aceitação com a ferramenta real
      (tests/e2e/test_create_cdrom_acceptance.py)
"""

import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de configuração padrão (defaults) semelhante ao uso real do projeto.

    Returns:
        str: Conteúdo YAML representando configuração padrão (defaults).
    """

    return """\
engine:
  log_level: INFO
steps:
  create.cdrom:
    enabled: true
    label: packer
    files:
      - floppy/autounattend.xml
      - floppy/setup.ps1
    output_path: null
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """
    YAML de override local: troca a lista de arquivos e o label.

    Returns:
        str: Conteúdo YAML representando configuração local de override.
    """

    return """\
engine:
  log_level: DEBUG
steps:
  create.cdrom:
    label: cidata
    files:
      - cloud-init/user-data
"""


# =====================================================
# Pipeline fixtures (Step + RunContext)
# =====================================================

@pytest.fixture
def dummy_config() -> dict:
    """
    Configuração mínima e válida, já resolvida.

    Returns:
        dict: Configuração mínima e válida para execução de testes.
    """
    return {
        "engine": {"log_level": "INFO"},
        "steps": {"create.cdrom": {"enabled": True}},
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """
    RunContext determinístico para testes.

    `run_id` e `created_at` são fixos; o contexto inicia sem artefatos,
    sem erro, sem eventos e sem warnings.

    Returns:
        RunContext: Contexto de execução isolado e previsível para testes.
    """
    from cdrom_builder.core.pipeline.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def DummyStep():
    """
    Fixture factory que fornece uma implementação mínima e duck-typed de um Step.

    A classe retornada:
    - expõe `id` e `kind`
    - implementa `run(ctx)` devolvendo o status pedido
    - implementa `cleanup(ctx)` registrando a chamada em `journal`

    Returns:
        type: Classe _DummyStep que pode ser instanciada pelos testes.
    """
    from cdrom_builder.core.pipeline.types import StepKind, StepStatus, StepResult

    class _DummyStep:
        def __init__(
            self,
            step_id: str = "prepare.inputs",
            kind: StepKind = StepKind.PREPARE,
            status: StepStatus = StepStatus.SUCCESS,
            journal: Optional[List[str]] = None,
        ):
            self.id = step_id
            self.kind = kind
            self.status = status
            self.journal = journal if journal is not None else []

        def run(self, ctx):
            self.journal.append(f"run:{self.id}")
            ctx.set_artifact(f"{self.id}.ok", True)
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=self.status,
                summary="dummy",
                artifacts={"ok": f"{self.id}.ok"},
            )

        def cleanup(self, ctx):
            self.journal.append(f"cleanup:{self.id}")

    return _DummyStep


# =====================================================
# Host + processo falsos
# =====================================================

@pytest.fixture
def make_host():
    """
    Factory de HostEnvironment com ferramentas "instaladas" explicitamente.

    Exemplo:
        make_host("windows", {"cygpath": "C:\\\\msys64\\\\usr\\\\bin\\\\cygpath.exe"})
    """
    from cdrom_builder.iso.host import HostEnvironment

    def _make(platform: str = "linux", tools: Optional[Dict[str, str]] = None) -> HostEnvironment:
        installed = dict(tools or {})
        return HostEnvironment(platform=platform, which=installed.get)

    return _make


@pytest.fixture
def linux_host(make_host):
    return make_host("linux", {"xorriso": "/usr/bin/xorriso"})


def _dest_from_argv(argv: List[str]) -> str:
    if Path(argv[0]).name.startswith("oscdimg"):
        return argv[-1]
    for flag in ("-output", "-o"):
        if flag in argv:
            return argv[argv.index(flag) + 1]
    return argv[-1]


class FakeRunner:
    """
    Substituto de `subprocess.run` para a ferramenta de ISO.

    - registra cada chamada (argv + kwargs)
    - fotografa o conteúdo do diretório de origem no momento da chamada
    - em sucesso, grava uma "imagem" no destino do comando
    - pode devolver exit code != 0 ou levantar uma exceção de launch
    """

    def __init__(
        self,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        raises: Optional[BaseException] = None,
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.calls: List[tuple] = []
        self.snapshots: List[Dict[str, bytes]] = []

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append((argv, kwargs))
        if self.raises is not None:
            raise self.raises

        source = Path(argv[-2] if Path(argv[0]).name.startswith("oscdimg") else argv[-1])
        snapshot: Dict[str, bytes] = {}
        if source.is_dir():
            for f in sorted(source.rglob("*")):
                if f.is_file():
                    snapshot[f.relative_to(source).as_posix()] = f.read_bytes()
        self.snapshots.append(snapshot)

        if self.returncode == 0:
            Path(_dest_from_argv(argv)).write_bytes(b"\x00" * 16 + b"CD001")

        return subprocess.CompletedProcess(argv, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def FakeRunnerClass():
    return FakeRunner


@pytest.fixture
def input_files(tmp_path: Path) -> List[str]:
    """Três arquivos com nomes distintos (um com espaço, caixa mista)."""
    names = ["test_cd_roms.tmp", "test cd files.tmp", "Test-Test-Test5.tmp"]
    files = []
    for i, name in enumerate(names):
        p = tmp_path / name
        p.write_text(f"file {i}\n", encoding="utf-8")
        files.append(str(p))
    return files
