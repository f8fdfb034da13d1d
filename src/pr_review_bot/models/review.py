"""
Review Data Models

리뷰 처리 결과 데이터 모델들
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class FileOutcome(Enum):
    """파일 단위 처리 결과"""
    COMMENTED = "commented"
    NO_CONTENT = "no_content"
    INFERENCE_FAILED = "inference_failed"
    EMPTY_REVIEW = "empty_review"
    COMMENT_FAILED = "comment_failed"
    FAILED = "failed"


@dataclass
class FileReport:
    """파일 하나의 처리 결과"""
    filename: str
    outcome: FileOutcome
    error: Optional[str] = None


@dataclass
class ProcessingReport:
    """PR 이벤트 하나의 처리 결과"""
    repository: str
    pr_number: int
    status: str  # 'completed', 'failed', 'ignored'
    files: List[FileReport] = field(default_factory=list)
    processing_time: float = 0.0
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def count(self, outcome: FileOutcome) -> int:
        """특정 결과의 파일 수"""
        return sum(1 for f in self.files if f.outcome == outcome)

    @property
    def commented_files(self) -> List[str]:
        return [f.filename for f in self.files if f.outcome == FileOutcome.COMMENTED]
