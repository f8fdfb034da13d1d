"""
Review Processing

This module sequences the per-file review of a pull request.
"""

from .orchestrator import ReviewOrchestrator

__all__ = ['ReviewOrchestrator']
