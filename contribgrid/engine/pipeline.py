"""Pipeline orchestrator — runs stages in dependency order."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time

from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.context import DetectionStatus, PipelineContext
from contribgrid.engine.pixels import PixelSource
from contribgrid.engine.registry import Layer, StageRegistry, StageSpec, get_registry

logger = logging.getLogger(__name__)

_LAYER_PACKAGES = ["layer0", "layer1", "layer2", "layer3"]


class Pipeline:
    """Orchestrates the stage pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or PipelineConfig()

    def run(self, ctx: PipelineContext) -> PipelineContext:
        """Run every registered stage on the given context."""
        start = time.perf_counter()
        ctx.config = self.config

        ordered = self.registry.resolve_order()
        logger.info("Pipeline: %d stages queued (%dx%d image)", len(ordered), ctx.width, ctx.height)

        for spec in ordered:
            self._run_stage(ctx, spec)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.0fms, status=%s",
            len(ctx.completed_stages),
            len(ordered),
            total,
            ctx.status.value,
        )
        return ctx

    def run_layer(self, ctx: PipelineContext, layer: Layer) -> PipelineContext:
        """Run only the stages of one layer. Earlier layers' output must already be on ctx."""
        ctx.config = self.config
        for spec in self.registry.layer_stages(layer):
            self._run_stage(ctx, spec)
        return ctx

    @staticmethod
    def _run_stage(ctx: PipelineContext, spec: StageSpec) -> None:
        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
            ctx.completed_stages.add(spec.id)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", spec.id, elapsed)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.id, e)


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire. Safe to call repeatedly."""
    for layer_name in _LAYER_PACKAGES:
        package_name = f"contribgrid.engine.{layer_name}"
        package = importlib.import_module(package_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{module_name}")


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline over the built-in stages."""
    register_stages()
    return Pipeline(config=config)


def parse_heatmap(
    pixels: PixelSource,
    years: list[int],
    config: PipelineConfig | None = None,
) -> PipelineContext:
    """Run the full pipeline over one pixel grid; the calendar is on ``ctx.calendar``."""
    ctx = PipelineContext(pixels=pixels, years=list(years))
    ctx = create_pipeline(config).run(ctx)
    if ctx.status in (DetectionStatus.NO_REGIONS, DetectionStatus.NO_GRID):
        logger.warning(
            "No heatmap grid detected (%s): check the theme or layout thresholds",
            ctx.status.value,
        )
    return ctx
