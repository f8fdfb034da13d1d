"""
Review Orchestrator

Drives one pull request event through the per-file review sequence:
list changed files, fetch each file, generate a review and post it
as a PR comment.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List

from ..github.client import GitHubClient, RepositoryError
from ..llm.generator import ReviewGenerator, InferenceError
from ..models.pull_request import PullRequestEvent, ChangedFile
from ..models.review import FileOutcome, FileReport, ProcessingReport


logger = logging.getLogger(__name__)


class ReviewOrchestrator:
    """
    Reviews every changed file of an opened pull request.

    Holds no per-event state, so one instance can serve concurrent
    events. Each file is handled in isolation: a failure on one file
    never prevents the others from being reviewed.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        review_generator: ReviewGenerator,
        max_concurrent_files: int = 1,
    ):
        """
        Initialize review orchestrator.

        Args:
            github_client: Client for the repository API
            review_generator: Client for the completion API
            max_concurrent_files: Files reviewed in parallel (1 = sequential)
        """
        if max_concurrent_files < 1:
            raise ValueError("max_concurrent_files must be at least 1")

        self.github_client = github_client
        self.review_generator = review_generator
        self.max_concurrent_files = max_concurrent_files

    def process(self, event: PullRequestEvent) -> ProcessingReport:
        """
        Review all files of a pull request and comment on it.

        Args:
            event: Opened pull request event

        Returns:
            ProcessingReport describing what happened to each file
        """
        start_time = datetime.now()
        report = ProcessingReport(
            repository=event.repository_full_name,
            pr_number=event.pull_request_number,
            status="completed",
            created_at=start_time,
        )

        if not event.is_reviewable:
            logger.info(f"Ignoring '{event.action}' event for {event}")
            report.status = "ignored"
            return report

        logger.info(f"Processing pull request {event}")

        try:
            files = self.github_client.get_pull_request_files(
                event.repository_full_name, event.pull_request_number
            )
        except RepositoryError as e:
            logger.error(f"Could not list files for {event}: {e}")
            report.status = "failed"
            report.error = str(e)
            report.processing_time = (datetime.now() - start_time).total_seconds()
            return report

        report.files = self._process_files(event, files)
        report.processing_time = (datetime.now() - start_time).total_seconds()

        logger.info(
            f"Finished {event}: {report.count(FileOutcome.COMMENTED)}/{len(files)} files commented "
            f"({report.processing_time:.2f}s)"
        )
        return report

    def _process_files(self, event: PullRequestEvent, files: List[ChangedFile]) -> List[FileReport]:
        if self.max_concurrent_files == 1 or len(files) <= 1:
            return [self._process_file(event, changed_file) for changed_file in files]

        workers = min(self.max_concurrent_files, len(files))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="file-review") as pool:
            return list(pool.map(lambda f: self._process_file(event, f), files))

    def _process_file(self, event: PullRequestEvent, changed_file: ChangedFile) -> FileReport:
        """Handle one file; unexpected errors are recorded so sibling files still run."""
        try:
            return self._review_file(event, changed_file)
        except Exception as e:
            logger.exception(f"Unexpected error reviewing {changed_file.filename} on {event}")
            return FileReport(changed_file.filename, FileOutcome.FAILED, error=str(e))

    def _review_file(self, event: PullRequestEvent, changed_file: ChangedFile) -> FileReport:
        """Fetch, review and comment on a single file."""
        filename = changed_file.filename

        code = self.github_client.get_file_content(
            event.repository_full_name, filename, event.head_branch
        )
        if code is None:
            logger.info(f"No content to review for {filename}, skipping")
            return FileReport(filename, FileOutcome.NO_CONTENT)

        try:
            review = self.review_generator.generate_review(code)
        except InferenceError as e:
            logger.error(f"Review generation failed for {filename}: {e}")
            return FileReport(filename, FileOutcome.INFERENCE_FAILED, error=str(e))

        if not review.strip():
            logger.warning(f"Empty review returned for {filename}, not commenting")
            return FileReport(filename, FileOutcome.EMPTY_REVIEW)

        try:
            self.github_client.create_review_comment(
                event.repository_full_name, event.pull_request_number, filename, review
            )
        except RepositoryError as e:
            logger.error(f"Failed to comment on {event} for {filename}: {e}")
            return FileReport(filename, FileOutcome.COMMENT_FAILED, error=str(e))

        logger.info(f"Commented on {event} for {filename}")
        return FileReport(filename, FileOutcome.COMMENTED)
