# src/cdrom_builder/core/pipeline/context.py
"""
RunContext: o estado explícito de uma run, compartilhado entre Steps.

Steps não se conhecem; tudo o que um Step deixa para os seguintes passa por
aqui. No caso do `create.cdrom`:

    - sucesso → artefato `cd_path` (caminho absoluto da ISO), nenhum erro
    - falha   → `error` preenchido (CdromErrorPayload), nenhum `cd_path`

O contexto também recolhe os eventos de log estruturados da run e os
warnings não fatais (ex.: falha ao remover o staging no cleanup).

Invariantes:
    - Um contexto por run; nada é global
    - `error` é escrito no máximo uma vez
    - Todo evento carrega `run_id`, `step_id`, `level`, `message` e timestamp UTC
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cdrom_builder.core.errors import CdromErrorPayload


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RunContext:
    """
    Estado de uma run do pipeline.

    Campos de construção:
        - run_id, created_at: identidade da run
        - config: configuração já resolvida (ver `load_config`)
        - meta: dados livres do chamador (ex.: diretório de trabalho em testes)

    Campos preenchidos durante a run:
        - error: erro terminal tipado, ou None
        - events: log estruturado, em ordem de emissão
        - warnings: mensagens não fatais agrupadas por `step_id`
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any]
    meta: Dict[str, Any] = field(default_factory=dict)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    error: Optional[CdromErrorPayload] = field(default=None, init=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # artefatos

    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        """Devolve o artefato `key`; ausência é KeyError (sem default implícito)."""
        try:
            return self._artifacts[key]
        except KeyError:
            raise KeyError(key) from None

    def get_artifact_or(self, key: str, default: Any = None) -> Any:
        return self._artifacts.get(key, default)

    # erro terminal

    def set_error(self, error: CdromErrorPayload) -> None:
        """Registra o erro terminal da run.

        Raises:
            RuntimeError: se a run já tem um erro; dois Steps falhando na
                mesma run indicam que um HALT foi ignorado.
        """
        if self.error is not None:
            raise RuntimeError(f"RunContext already holds an error: {self.error.type}")
        self.error = error

    def has_error(self) -> bool:
        return self.error is not None

    # log e warnings

    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event: Dict[str, Any] = dict(extra)
        event.update(
            run_id=self.run_id,
            step_id=step_id,
            level=level,
            message=message,
            timestamp=_utc_now(),
        )
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        self.warnings.setdefault(step_id, []).append(message)
