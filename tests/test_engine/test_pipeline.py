"""Tests for the pipeline orchestrator."""

import numpy as np

from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.context import DetectionStatus, PipelineContext
from contribgrid.engine.pipeline import Pipeline, create_pipeline
from contribgrid.engine.pixels import ArrayPixelSource
from contribgrid.engine.registry import Layer, StageRegistry, StageSpec
from tests.conftest import CELL, PITCH, blank_canvas, draw_grid, year_levels


def test_pipeline_runs_stages():
    reg = StageRegistry()
    results = []

    def s1(ctx: PipelineContext) -> None:
        results.append("s1")

    def s2(ctx: PipelineContext) -> None:
        results.append("s2")

    reg.register(StageSpec(id="S0.01", layer=Layer.CLASSIFICATION, fn=s1))
    reg.register(StageSpec(id="S1.01", layer=Layer.SEGMENTATION, fn=s2, dependencies=["S0.01"]))

    pipeline = Pipeline(registry=reg)
    ctx = PipelineContext()
    pipeline.run(ctx)

    assert results == ["s1", "s2"]
    assert ctx.completed_stages == {"S0.01", "S1.01"}


def test_pipeline_handles_errors():
    reg = StageRegistry()

    def fail(ctx: PipelineContext) -> None:
        raise ValueError("test error")

    reg.register(StageSpec(id="S0.01", layer=Layer.CLASSIFICATION, fn=fail))

    ctx = Pipeline(registry=reg).run(PipelineContext(pixels=ArrayPixelSource.blank(4, 4)))

    assert "test error" in ctx.errors["S0.01"]
    assert ctx.status is DetectionStatus.FAILED
    assert not ctx.grid_detected


def test_pipeline_installs_config():
    config = PipelineConfig(column_tolerance=0)
    ctx = Pipeline(registry=StageRegistry(), config=config).run(PipelineContext())
    assert ctx.config is config


def test_run_layer_uses_previous_output():
    canvas = draw_grid(blank_canvas(200, 120), year_levels(3), (10, 10))
    ctx = PipelineContext(pixels=ArrayPixelSource(canvas), years=[2021])
    pipeline = create_pipeline()

    pipeline.run_layer(ctx, Layer.CLASSIFICATION)
    pipeline.run_layer(ctx, Layer.SEGMENTATION)
    assert ctx.level_grid is not None
    assert len(ctx.regions) == 21
    assert ctx.columns == []

    pipeline.run_layer(ctx, Layer.LAYOUT)
    assert [c.x for c in ctx.columns] == [10, 10 + PITCH, 10 + 2 * PITCH]
    assert len(ctx.groups) == 1
    assert ctx.calendar == {}

    pipeline.run_layer(ctx, Layer.MAPPING)
    assert sorted(ctx.calendar[2021]) == [1, 2, 3]


def test_full_pipeline_on_single_grid():
    canvas = draw_grid(blank_canvas(200, 120), year_levels(4), (10, 10))
    ctx = create_pipeline().run(PipelineContext(pixels=ArrayPixelSource(canvas), years=[2021]))

    assert ctx.status is DetectionStatus.OK
    assert ctx.grid_detected
    assert ctx.errors == {}
    assert ctx.completed_stages == {"S0.01", "S1.01", "S2.01", "S2.02", "S3.01"}
    assert all(r.size == CELL * CELL for r in ctx.regions)
    assert ctx.calendar[2021][1] == {"su": 0, "m": 1, "t": 2, "w": 3, "th": 4, "f": 0, "s": 1}


def test_empty_image():
    ctx = create_pipeline().run(PipelineContext(pixels=ArrayPixelSource(np.zeros((0, 0, 3), dtype=np.uint8)), years=[2022]))
    assert ctx.errors == {}
    assert ctx.regions == []
    assert ctx.calendar == {}
    assert ctx.status is DetectionStatus.EMPTY_IMAGE


def test_no_pixels():
    ctx = create_pipeline().run(PipelineContext(years=[2022]))
    assert ctx.errors == {}
    assert ctx.calendar == {}
    assert ctx.status is DetectionStatus.EMPTY_IMAGE
