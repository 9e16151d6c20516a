"""
Configuration utilities for environment-driven settings.
"""

from .settings import PipelineSettings

__all__ = ['PipelineSettings']
