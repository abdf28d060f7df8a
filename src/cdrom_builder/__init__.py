# src/cdrom_builder/__init__.py
"""
cdrom_builder — Step de pipeline que materializa imagens ISO9660 ("CD").

O Step `create.cdrom` prepara arquivos de entrada em um diretório de
staging, invoca a ferramenta de autoria de ISO disponível no host
(oscdimg, xorriso do MSYS2, hdiutil, xorriso/mkisofs/genisoimage) e
publica o caminho da imagem no RunContext para os Steps seguintes.

Arquitetura em alto nível:
    - core.config   → carregamento e merge de configuração
    - core.pipeline → protocolo de Step, resultados e contexto de execução
    - core.engine   → execução sequencial com HALT e cleanup reverso
    - iso           → tradução de caminhos, resolução de ferramenta,
                      execução de processo e tracker de staging
    - steps.create  → o Step `create.cdrom`

Limites explícitos:
    - Não implementa um escritor de ISO9660
    - Não gerencia ciclo de vida de máquinas virtuais
    - Não re-tenta invocações de ferramenta que falharam
"""

from .steps.create.cdrom import CD_PATH_KEY, CreateCdromStep

__all__ = ["CD_PATH_KEY", "CreateCdromStep"]
