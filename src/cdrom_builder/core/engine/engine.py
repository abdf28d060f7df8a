# src/cdrom_builder/core/engine/engine.py
"""
Engine de execução do pipeline do cdrom_builder.

Política de execução:
- Steps rodam na ordem declarada, cada um no máximo uma vez.
- `steps.<id>.enabled: false` → SKIPPED (o Step não roda nem é limpo).
- O primeiro StepResult com `action == HALT` interrompe o pipeline:
  nenhum Step posterior roda.
- Exceções inesperadas de um Step viram FAILED com payload
  ENGINE_EXECUTION_ERROR (sem stack trace cru para o operador) e o erro é
  registrado no RunContext, caso o Step ainda não o tenha feito.
- Ao final (sucesso ou HALT), `cleanup` de todo Step iniciado roda em
  ordem reversa. Falhas de cleanup viram warnings no RunContext e nunca
  alteram os resultados.

Correção (compatibilidade com StepResult frozen dataclass):
- O Engine **não** muta instâncias de StepResult in-place; o
  enriquecimento com warnings do RunContext usa dataclasses.replace.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Sequence

from cdrom_builder.core.pipeline.context import RunContext
from cdrom_builder.core.pipeline.step import Step
from cdrom_builder.core.pipeline.types import StepAction, StepKind, StepResult, StepStatus

from cdrom_builder.core.errors import (
    CdromErrorPayload,
    engine_configuration_error,
    payload_from_exception,
)


class DuplicateStepIdError(ValueError):
    """Dois Steps com o mesmo `id` no pipeline; falha fatal antes da execução."""


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma execução de pipeline."""

    steps: Dict[str, StepResult] = field(default_factory=dict)
    halted: bool = False

    @property
    def ok(self) -> bool:
        return not self.halted


class Engine:
    """Engine canônico do cdrom_builder (execução sequencial + cleanup reverso)."""

    def __init__(self, *, steps: Sequence[Step], ctx: RunContext):
        self.steps: List[Step] = list(steps)
        self.ctx: RunContext = ctx
        self._validate_ids()

    def _validate_ids(self) -> None:
        seen = set()
        for step in self.steps:
            step_id = getattr(step, "id", None)
            if not isinstance(step_id, str) or not step_id.strip():
                raise ValueError("step.id must be a non-empty string")
            if step_id in seen:
                raise DuplicateStepIdError(f"Duplicate step id: {step_id}")
            seen.add(step_id)

    def _is_enabled(self, step_id: str) -> bool:
        steps_cfg = (self.ctx.config or {}).get("steps", {}) or {}
        step_cfg = steps_cfg.get(step_id, {}) or {}
        enabled = step_cfg.get("enabled", True)
        return bool(enabled)

    def _ctx_warnings_for(self, step_id: str) -> List[str]:
        return list(self.ctx.warnings.get(step_id, []) or [])

    def _enrich_step_result(self, result: StepResult) -> StepResult:
        """Retorna uma NOVA instância com os warnings do RunContext mesclados (sem duplicatas)."""
        merged: List[str] = []
        for msg in list(result.warnings) + self._ctx_warnings_for(result.step_id):
            if msg not in merged:
                merged.append(msg)
        return replace(result, warnings=merged)

    def _failed(self, step: Step, error: CdromErrorPayload) -> StepResult:
        if not self.ctx.has_error():
            self.ctx.set_error(error)
        return StepResult(
            step_id=step.id,
            kind=getattr(step, "kind", StepKind.BUILD) or StepKind.BUILD,
            status=StepStatus.FAILED,
            summary=error.message,
            payload={"error": error.to_dict()},
        )

    def _run_step(self, step: Step) -> StepResult:
        sid = step.id
        try:
            result = step.run(self.ctx)
        except Exception as e:
            self.ctx.log(
                step_id=sid,
                level="error",
                message="step raised",
                error_type=e.__class__.__name__,
                error_message=str(e) or "error",
            )
            return self._failed(step, payload_from_exception(e, step=sid))

        if not isinstance(result, StepResult):
            return self._failed(
                step,
                engine_configuration_error(
                    message="Step retornou tipo inválido",
                    details={
                        "step_id": sid,
                        "expected": "StepResult",
                        "received": result.__class__.__name__,
                    },
                    hint="Ajuste o Step para retornar StepResult",
                ),
            )
        return result

    def _cleanup(self, started: List[Step]) -> None:
        for step in reversed(started):
            try:
                step.cleanup(self.ctx)
            except Exception as e:
                message = f"cleanup failed: {e.__class__.__name__}: {e}"
                self.ctx.add_warning(step_id=step.id, message=message)
                self.ctx.log(step_id=step.id, level="warning", message=message)

    def run(self) -> RunResult:
        results: Dict[str, StepResult] = {}
        started: List[Step] = []
        halted = False

        try:
            for step in self.steps:
                sid = step.id

                if not self._is_enabled(sid):
                    results[sid] = StepResult(
                        step_id=sid,
                        kind=getattr(step, "kind", StepKind.BUILD) or StepKind.BUILD,
                        status=StepStatus.SKIPPED,
                        summary="skipped by config",
                    )
                    continue

                started.append(step)
                result = self._enrich_step_result(self._run_step(step))
                results[sid] = result

                if result.action == StepAction.HALT:
                    halted = True
                    break
        finally:
            self._cleanup(started)

        return RunResult(steps=results, halted=halted)
