"""Orchestrator package - coordinates upload workflows."""
from .batch import BatchOrchestrator
from .core import SocialMediaUploader
from .models import BatchResult

__all__ = ["SocialMediaUploader", "BatchOrchestrator", "BatchResult"]
