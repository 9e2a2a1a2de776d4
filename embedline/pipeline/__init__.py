from embedline.pipeline.engine import PipelineEngine
from embedline.pipeline.pipeline import Pipeline, PipelineStep
from embedline.pipeline.registry import PipelineRegistry
from embedline.pipeline.schema import PipelineSpec

__all__ = ["Pipeline", "PipelineEngine", "PipelineRegistry", "PipelineSpec", "PipelineStep"]
