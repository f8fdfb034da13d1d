"""
Pull Request Data Models

Pull Request 이벤트 및 변경 파일 데이터 모델들
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from pydantic import BaseModel, ValidationError, validator


REVIEWABLE_ACTION = "opened"


class InvalidEventError(ValueError):
    """Webhook payload is missing fields required for a review."""


class PullRequestEvent(BaseModel):
    """GitHub pull_request 웹훅 이벤트"""
    repository_full_name: str
    head_branch: str
    pull_request_number: int
    action: str

    class Config:
        frozen = True

    @validator('repository_full_name')
    def validate_repository(cls, v):
        owner, _, name = v.partition('/')
        if not owner or not name:
            raise ValueError('Repository must be in format "owner/repo"')
        return v

    @validator('head_branch')
    def validate_head_branch(cls, v):
        if not v.strip():
            raise ValueError('Head branch cannot be empty')
        return v

    @validator('pull_request_number')
    def validate_pr_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v

    @property
    def is_reviewable(self) -> bool:
        """리뷰 대상 이벤트인지 확인"""
        return self.action == REVIEWABLE_ACTION

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PullRequestEvent":
        """
        Build an event from a raw GitHub pull_request webhook payload.

        Raises:
            InvalidEventError: If a required field is missing or invalid
        """
        if not isinstance(payload, dict):
            raise InvalidEventError("Payload must be a JSON object")

        try:
            return cls(
                repository_full_name=(payload.get('repository') or {}).get('full_name'),
                head_branch=((payload.get('pull_request') or {}).get('head') or {}).get('ref'),
                pull_request_number=payload.get('number'),
                action=payload.get('action'),
            )
        except (ValidationError, AttributeError) as e:
            raise InvalidEventError(f"Invalid pull_request payload: {e}") from e

    def __str__(self) -> str:
        return f"{self.repository_full_name}#{self.pull_request_number}"


@dataclass(frozen=True)
class ChangedFile:
    """PR에서 변경된 파일"""
    filename: str
    status: Optional[str] = None  # 'added', 'modified', 'removed', 'renamed', ...
    additions: int = 0
    deletions: int = 0

    def __post_init__(self):
        """데이터 검증"""
        if not self.filename:
            raise ValueError("Filename cannot be empty")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ChangedFile":
        """GitHub API 응답에서 생성"""
        return cls(
            filename=data['filename'],
            status=data.get('status'),
            additions=data.get('additions', 0),
            deletions=data.get('deletions', 0),
        )
