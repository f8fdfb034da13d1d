#!/usr/bin/env python3
"""
Pull Request Review Demo

Runs the review pipeline once against an existing pull request,
without going through the webhook.

Usage:
    python examples/review_pull_request_demo.py <owner/repo> <pr_number> <head_branch>

Example:
    python examples/review_pull_request_demo.py octo/widgets 42 feature/login
"""

import sys
import os
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pr_review_bot.api import build_orchestrator
from pr_review_bot.config import ConfigError, load_config, setup_logging
from pr_review_bot.models.pull_request import PullRequestEvent, InvalidEventError
from pr_review_bot.models.review import FileOutcome


def main():
    """Main demo function."""
    if len(sys.argv) != 4:
        print("Usage: python review_pull_request_demo.py <owner/repo> <pr_number> <head_branch>")
        print("Example: python review_pull_request_demo.py octo/widgets 42 feature/login")
        sys.exit(1)

    try:
        config = load_config()
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(config.logging)
    logger = logging.getLogger(__name__)

    try:
        event = PullRequestEvent.from_payload({
            'action': 'opened',
            'number': int(sys.argv[2]) if sys.argv[2].isdigit() else None,
            'repository': {'full_name': sys.argv[1]},
            'pull_request': {'head': {'ref': sys.argv[3]}},
        })
    except InvalidEventError as e:
        print(f"Error: {e}")
        sys.exit(1)

    logger.info(f"Reviewing {event} at {event.head_branch}...")
    report = build_orchestrator(config).process(event)

    print(f"\n📋 Review of {report.repository}#{report.pr_number}: {report.status}")
    if report.error:
        print(f"   Error: {report.error}")
    for outcome in FileOutcome:
        print(f"   {outcome.value}: {report.count(outcome)}")
    print(f"   Time: {report.processing_time:.2f}s")

    for file_report in report.files:
        suffix = f" ({file_report.error})" if file_report.error else ""
        print(f"   - {file_report.filename}: {file_report.outcome.value}{suffix}")

    sys.exit(0 if report.status == "completed" else 1)


if __name__ == "__main__":
    main()
