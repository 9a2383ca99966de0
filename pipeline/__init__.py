"""
End-to-end batch run: claim folder -> merged table -> triangle.
"""

from .runner import PipelineResult, run_pipeline

__all__ = ["PipelineResult", "run_pipeline"]
