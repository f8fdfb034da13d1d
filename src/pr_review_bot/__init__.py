"""
PR Review Bot

GitHub Pull Request 자동 코드 리뷰 웹훅 서비스
"""

__version__ = "1.0.0"

from .review.orchestrator import ReviewOrchestrator

__all__ = ["ReviewOrchestrator", "__version__"]
