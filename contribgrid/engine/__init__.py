"""contribgrid heatmap recovery engine."""

from contribgrid.engine.registry import stage, Layer, get_registry
from contribgrid.engine.context import DetectionStatus, PipelineContext
from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.pipeline import Pipeline, create_pipeline, parse_heatmap

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "DetectionStatus",
    "PipelineContext",
    "PipelineConfig",
    "Pipeline",
    "create_pipeline",
    "parse_heatmap",
]
