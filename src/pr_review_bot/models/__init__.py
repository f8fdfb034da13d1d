"""
Data Models

PR 리뷰 봇의 핵심 데이터 모델들
"""

from .pull_request import PullRequestEvent, ChangedFile, InvalidEventError
from .review import FileOutcome, FileReport, ProcessingReport

__all__ = [
    "PullRequestEvent",
    "ChangedFile",
    "InvalidEventError",
    "FileOutcome",
    "FileReport",
    "ProcessingReport",
]
