"""Validation pipeline."""

from cxpolicy.engine.pipeline import PipelineRun, PipelineStage, ValidationPipeline

__all__ = ["PipelineRun", "PipelineStage", "ValidationPipeline"]
