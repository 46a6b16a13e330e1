"""Pipeline orchestration from query or pasted text to word cloud and PNG."""

from .orchestrator import WordCloudPipeline, PipelineResult, ExportArtifact

__all__ = [
    'WordCloudPipeline',
    'PipelineResult',
    'ExportArtifact',
]
