"""
Webhook API

Flask application receiving GitHub pull_request webhooks. Reviews run
on a background executor so the webhook is acknowledged immediately.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

from flask import Flask, request, jsonify

from . import __version__
from .config import AppConfig, load_config, setup_logging
from .github.client import GitHubClient
from .llm.generator import ReviewGenerator
from .llm.prompts import PromptBuilder
from .models.pull_request import PullRequestEvent, InvalidEventError, REVIEWABLE_ACTION
from .review.orchestrator import ReviewOrchestrator


logger = logging.getLogger(__name__)

PULL_REQUEST_EVENT = "pull_request"
EVENT_HEADER = "X-GitHub-Event"


def build_orchestrator(config: AppConfig) -> ReviewOrchestrator:
    """Wire the GitHub and model clients from configuration."""
    auth = config.auth
    github_client = GitHubClient.from_config(auth, config.github)
    review_generator = ReviewGenerator.from_config(
        auth,
        config.inference,
        prompt_builder=PromptBuilder(
            language=config.review.language,
            framework=config.review.framework,
        ),
    )
    return ReviewOrchestrator(
        github_client,
        review_generator,
        max_concurrent_files=config.review.max_concurrent_files,
    )


def run_review(orchestrator: ReviewOrchestrator, event: PullRequestEvent) -> None:
    """Background task body. Nothing is reported back to the webhook sender."""
    try:
        report = orchestrator.process(event)
    except Exception:
        logger.exception(f"Review of {event} crashed")
        return

    if report.status == "failed":
        logger.error(f"Review of {event} failed: {report.error}")


def create_app(
    config: Optional[AppConfig] = None,
    orchestrator: Optional[ReviewOrchestrator] = None,
    executor: Optional[Executor] = None,
) -> Flask:
    """
    Create the webhook application.

    Configuration is validated before the app exists, so a missing
    credential stops startup instead of failing on the first webhook.

    Args:
        config: Application config (default: loaded from the environment)
        orchestrator: Review orchestrator (default: built from config)
        executor: Executor running reviews in the background

    Raises:
        ConfigError: If required configuration is missing or invalid
    """
    if config is None:
        config = load_config()
    else:
        config.validate()

    setup_logging(config.logging)

    orchestrator = orchestrator or build_orchestrator(config)
    executor = executor or ThreadPoolExecutor(
        max_workers=config.review.background_workers,
        thread_name_prefix="pr-review",
    )

    app = Flask(__name__)
    app.extensions['pr_review_bot'] = {
        'config': config,
        'orchestrator': orchestrator,
        'executor': executor,
    }

    def acknowledge():
        return jsonify({'message': 'Webhook received'}), 200

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'pr-review-bot',
            'version': __version__
        })

    @app.route('/webhook', methods=['POST'])
    def handle_webhook():
        """Receive a GitHub webhook and schedule a review for opened PRs."""
        event_type = request.headers.get(EVENT_HEADER)
        if event_type != PULL_REQUEST_EVENT:
            logger.debug(f"Ignoring webhook event type: {event_type}")
            return acknowledge()

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not payload.get('number') or payload.get('action') != REVIEWABLE_ACTION:
            logger.debug("Ignoring pull_request webhook that is not an opened PR")
            return acknowledge()

        try:
            event = PullRequestEvent.from_payload(payload)
        except InvalidEventError as e:
            logger.warning(f"Rejected pull_request webhook: {e}")
            return acknowledge()

        logger.info(f"Scheduling review for {event}")
        executor.submit(run_review, orchestrator, event)
        return acknowledge()

    return app


def main() -> None:
    """Run the webhook server with Flask's built-in server."""
    app = create_app()
    server = app.extensions['pr_review_bot']['config'].server

    logger.info(f"Starting PR Review Bot on http://{server.host}:{server.port}")
    logger.info("Endpoints: GET /api/v1/health, POST /webhook")

    app.run(host=server.host, port=server.port, debug=server.debug)
