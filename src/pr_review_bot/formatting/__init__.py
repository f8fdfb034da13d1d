"""
Comment Formatting

This module formats model reviews into GitHub PR comment bodies.
"""

from .github import format_review_comment

__all__ = ['format_review_comment']
