# tests/iso/test_iso_resolver.py
"""
Testes da resolução da ferramenta de criação de ISO.

Este módulo valida a escolha da ferramenta por host e o vetor de
argumentos exato produzido para cada uma delas.

Os testes asseguram que:
- a ordem de resolução é oscdimg → xorriso do MSYS2 → hdiutil →
  xorriso → mkisofs → genisoimage (primeira disponível vence)
- no MSYS2 o executável fica ao lado do `cygpath` e os caminhos são
  traduzidos para a sintaxe POSIX (destino, depois origem, no fim)
- cada ferramenta recebe o label e os caminhos na posição que espera
- sem ferramenta disponível, o erro lista as candidatas
- a resolução é pura: mesmas entradas, mesmo comando; nada é lançado

Decisões arquiteturais:
    - O host é injetado (plataforma + `which`), então todos os ramos
      são testáveis em qualquer sistema operacional
"""

from dataclasses import FrozenInstanceError

import pytest

try:
    from cdrom_builder.core.exceptions import ToolNotFoundError, UnsupportedPathError
    from cdrom_builder.iso.resolver import (
        DEFAULT_LABEL,
        SUPPORTED_TOOLS,
        ToolKind,
        resolve_iso_command,
    )
except Exception as e:  # noqa: BLE001
    ToolNotFoundError = None
    UnsupportedPathError = None
    DEFAULT_LABEL = None
    SUPPORTED_TOOLS = None
    ToolKind = None
    resolve_iso_command = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


CYGPATH = "C:\\msys64\\usr\\bin\\cygpath.exe"


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing resolver. Implement:\n"
            "- src/cdrom_builder/iso/resolver.py (resolve_iso_command, ToolKind)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_msys_xorriso_uses_posix_paths(make_host):
    """
    Verifica o comando para um host Windows com MSYS2 (cygpath no PATH).

    Invariantes:
        - O executável termina em `\\usr\\bin\\xorriso.exe`
        - Os dois últimos argumentos são o destino e a origem, nessa
          ordem, já traduzidos para `/c/...`
    """
    _require_imports()
    host = make_host("windows", {"cygpath": CYGPATH})

    cmd = resolve_iso_command(
        "C:\\Windows\\Temp\\test-cd.iso",
        "C:\\Windows\\Temp\\test-cd",
        host,
    )

    assert cmd.kind == ToolKind.MSYS_XORRISO
    assert cmd.executable.endswith("\\usr\\bin\\xorriso.exe")
    assert cmd.executable == "C:\\msys64\\usr\\bin\\xorriso.exe"
    assert cmd.argv[-2] == "/c/Windows/Temp/test-cd.iso"
    assert cmd.argv[-1] == "/c/Windows/Temp/test-cd"
    assert cmd.argv == [
        "C:\\msys64\\usr\\bin\\xorriso.exe",
        "-as", "genisoimage", "-rock", "-joliet",
        "-volid", DEFAULT_LABEL,
        "-output", "/c/Windows/Temp/test-cd.iso",
        "/c/Windows/Temp/test-cd",
    ]


def test_msys_unsupported_path_is_rejected(make_host):
    _require_imports()
    host = make_host("windows", {"cygpath": CYGPATH})
    with pytest.raises(UnsupportedPathError):
        resolve_iso_command("C:relative.iso", "C:\\Windows\\Temp\\test-cd", host)


def test_oscdimg_wins_on_windows(make_host):
    _require_imports()
    host = make_host("windows", {"oscdimg": "C:\\ADK\\oscdimg.exe", "cygpath": CYGPATH})

    cmd = resolve_iso_command("C:\\out\\cd.iso", "C:\\stage", host, label="cidata")

    assert cmd.kind == ToolKind.OSCDIMG
    assert cmd.argv == ["C:\\ADK\\oscdimg.exe", "-j1", "-o", "-m", "-lcidata", "C:\\stage", "C:\\out\\cd.iso"]


def test_cygpath_is_ignored_off_windows(make_host):
    _require_imports()
    host = make_host("linux", {"cygpath": "/usr/bin/cygpath", "mkisofs": "/usr/bin/mkisofs"})

    cmd = resolve_iso_command("/tmp/cd.iso", "/tmp/stage", host)
    assert cmd.kind == ToolKind.MKISOFS


def test_windows_without_msys_falls_back_to_path_tools(make_host):
    _require_imports()
    host = make_host("windows", {"xorriso": "C:\\tools\\xorriso.exe"})

    cmd = resolve_iso_command("C:\\out\\cd.iso", "C:\\stage", host)

    assert cmd.kind == ToolKind.XORRISO
    # caminhos nativos: sem tradução fora do MSYS2
    assert cmd.argv[-2:] == ["C:\\out\\cd.iso", "C:\\stage"]


def test_hdiutil_on_macos(make_host):
    _require_imports()
    host = make_host("darwin", {"hdiutil": "/usr/bin/hdiutil", "mkisofs": "/opt/homebrew/bin/mkisofs"})

    cmd = resolve_iso_command("/tmp/packer1.iso", "/tmp/packer_to_cdrom1", host, label="cfg")

    assert cmd.kind == ToolKind.HDIUTIL
    assert cmd.argv == [
        "/usr/bin/hdiutil", "makehybrid",
        "-o", "/tmp/packer1.iso",
        "-hfs", "-joliet", "-iso",
        "-default-volume-name", "cfg",
        "/tmp/packer_to_cdrom1",
    ]


@pytest.mark.parametrize(
    "installed, kind_name",
    [
        (("xorriso", "mkisofs", "genisoimage"), "XORRISO"),
        (("mkisofs", "genisoimage"), "MKISOFS"),
        (("genisoimage",), "GENISOIMAGE"),
    ],
)
def test_linux_tool_preference(make_host, installed, kind_name):
    _require_imports()
    host = make_host("linux", {name: f"/usr/bin/{name}" for name in installed})

    cmd = resolve_iso_command("/tmp/cd.iso", "/tmp/stage", host)
    assert cmd.kind == ToolKind[kind_name]
    assert cmd.executable == f"/usr/bin/{installed[0]}"


def test_mkisofs_arguments(make_host):
    _require_imports()
    host = make_host("linux", {"genisoimage": "/usr/bin/genisoimage"})

    cmd = resolve_iso_command("/tmp/cd.iso", "/tmp/stage", host, label="packer")
    assert cmd.args == ("-rock", "-joliet", "-volid", "packer", "-o", "/tmp/cd.iso", "/tmp/stage")


def test_linux_xorriso_arguments(linux_host):
    _require_imports()
    cmd = resolve_iso_command("/tmp/cd.iso", "/tmp/stage", linux_host)
    assert cmd.args == (
        "-as", "genisoimage", "-rock", "-joliet",
        "-volid", "packer",
        "-output", "/tmp/cd.iso",
        "/tmp/stage",
    )


def test_no_tool_raises_with_candidates(make_host):
    """
    Sem nenhuma ferramenta no host, a resolução falha de forma acionável.

    Invariantes:
        - `details.candidates` lista as ferramentas suportadas
        - `details.platform` identifica o host
        - `hint` orienta a instalação
    """
    _require_imports()
    host = make_host("linux", {})

    with pytest.raises(ToolNotFoundError) as ei:
        resolve_iso_command("/tmp/cd.iso", "/tmp/stage", host)

    assert ei.value.details["candidates"] == SUPPORTED_TOOLS
    assert ei.value.details["platform"] == "linux"
    assert "xorriso" in ei.value.hint


def test_resolution_is_pure_and_deterministic(make_host, tmp_path):
    _require_imports()
    lookups = []

    def which(name):
        lookups.append(name)
        return {"xorriso": "/usr/bin/xorriso"}.get(name)

    from cdrom_builder.iso.host import HostEnvironment

    host = HostEnvironment(platform="linux", which=which)
    out = tmp_path / "cd.iso"
    stage = tmp_path / "stage"

    first = resolve_iso_command(out, stage, host)
    second = resolve_iso_command(out, stage, host)

    assert first == second
    assert lookups[: len(lookups) // 2] == lookups[len(lookups) // 2:]
    # nenhum arquivo é criado pela resolução
    assert not out.exists()
    assert not stage.exists()


def test_resolved_command_is_immutable(linux_host):
    _require_imports()
    cmd = resolve_iso_command("/tmp/cd.iso", "/tmp/stage", linux_host)
    with pytest.raises(FrozenInstanceError):
        cmd.executable = "/bin/false"  # type: ignore[misc]
    cmd.argv.append("--extra")
    assert "--extra" not in cmd.argv
