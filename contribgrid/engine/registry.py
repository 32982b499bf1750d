"""Stage registry — every pipeline stage is a function registered via decorator.

Usage:
    @stage(id="S2.01", layer=Layer.LAYOUT, dependencies=["S1.01"])
    def column_clustering(ctx: PipelineContext) -> None:
        ctx.columns = cluster_columns(...)

Stages run layer by layer: pixel levels, then regions, then columns and grids,
then the calendar. A stage may only depend on stages of its own or an earlier
layer, so the run order is always layer-major.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from contribgrid.engine.context import PipelineContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    CLASSIFICATION = 0
    SEGMENTATION = 1
    LAYOUT = 2
    MAPPING = 3


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["PipelineContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    """Registry of pipeline stages, keyed by stage id."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s): %s", spec.id, spec.layer.name, spec.description)

    def _check_dependencies(self) -> None:
        for spec in self._stages.values():
            for dep in spec.dependencies:
                other = self._stages.get(dep)
                if other is None:
                    raise ValueError(f"Stage {spec.id} depends on unregistered stage {dep}")
                if other.layer > spec.layer:
                    raise ValueError(
                        f"Stage {spec.id} ({spec.layer.name}) depends on "
                        f"{dep} from the later layer {other.layer.name}"
                    )

    def resolve_order(self) -> list[StageSpec]:
        """Run order: layer by layer, and within a layer in dependency waves sorted by id."""
        self._check_dependencies()

        ordered: list[StageSpec] = []
        done: set[str] = set()
        for layer in Layer:
            pending = sorted(
                (s for s in self._stages.values() if s.layer == layer),
                key=lambda s: s.id,
            )
            while pending:
                ready = [s for s in pending if done.issuperset(s.dependencies)]
                if not ready:
                    raise ValueError(
                        f"Circular dependency detected among: {[s.id for s in pending]}"
                    )
                ordered.extend(ready)
                done.update(s.id for s in ready)
                pending = [s for s in pending if s.id not in done]

        return ordered

    def layer_stages(self, layer: Layer) -> list[StageSpec]:
        return [s for s in self.resolve_order() if s.layer == layer]

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: Callable[["PipelineContext"], None]):
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=dependencies or [],
                description=description,
            )
        )
        return fn

    return decorator
