"""
LLM Review Engine

This module provides prompt construction and review generation
through a hosted chat-completions model.
"""

from .prompts import PromptBuilder
from .generator import ReviewGenerator, GenerationConfig, InferenceError

__all__ = ['PromptBuilder', 'ReviewGenerator', 'GenerationConfig', 'InferenceError']
