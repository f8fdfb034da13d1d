"""
Review Generator

Generates code reviews through an Azure OpenAI chat-completions
deployment. One request per file, no retries.
"""

import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass
import requests

from ..config import AuthContext, InferenceConfig
from .prompts import PromptBuilder


logger = logging.getLogger(__name__)


class InferenceError(Exception):
    """Completion request failed or returned an unusable response."""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


@dataclass(frozen=True)
class GenerationConfig:
    """Configuration for LLM generation."""
    model: str = "gpt-4o-mini"
    max_tokens: int = 500
    api_version: str = "2024-02-01"


class ReviewGenerator:
    """
    Generates code reviews using a hosted chat-completions model.

    Stateless apart from the endpoint, credentials and generation
    settings captured at construction.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment: str,
        generation_config: Optional[GenerationConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize review generator.

        Args:
            endpoint: Azure OpenAI resource URL
            api_key: API key sent as a bearer token
            deployment: Model deployment name
            generation_config: Model, output length and API version
            prompt_builder: Builds the chat messages
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
        """
        self.endpoint = endpoint.rstrip('/')
        self.api_key = api_key
        self.deployment = deployment
        self.generation_config = generation_config or GenerationConfig()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(
        cls,
        auth: AuthContext,
        config: InferenceConfig,
        prompt_builder: Optional[PromptBuilder] = None,
    ) -> "ReviewGenerator":
        """Build from the startup credentials and non-secret generation settings."""
        return cls(
            endpoint=auth.inference_endpoint,
            api_key=auth.inference_api_key,
            deployment=auth.model_deployment_name,
            generation_config=GenerationConfig(
                model=config.model,
                max_tokens=config.max_tokens,
                api_version=config.api_version,
            ),
            prompt_builder=prompt_builder,
            timeout=config.timeout_seconds,
        )

    @property
    def api_url(self) -> str:
        return f"{self.endpoint}/openai/deployments/{self.deployment}/chat/completions"

    def generate_review(self, code: str) -> str:
        """
        Generate a review for one file.

        Args:
            code: File content to review

        Returns:
            Completion text, returned as is even when it looks empty

        Raises:
            InferenceError: If the request fails or the response has no completion
        """
        payload = {
            'model': self.generation_config.model,
            'messages': self.prompt_builder.build_messages(code),
            'max_tokens': self.generation_config.max_tokens,
        }

        try:
            response = self.session.post(
                self.api_url,
                params={'api-version': self.generation_config.api_version},
                json=payload,
                headers={
                    'Content-Type': 'application/json',
                    'Authorization': f'Bearer {self.api_key}',
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error calling OpenAI API: {e}")
            raise InferenceError("Failed to fetch OpenAI response") from e

        try:
            data = response.json()
        except ValueError:
            data = response.text

        if not response.ok:
            logger.error(f"Error calling OpenAI API: {response.status_code} {data}")
            raise InferenceError(
                f"Failed to fetch OpenAI response: HTTP {response.status_code}",
                status_code=response.status_code,
                response_data=data,
            )

        content = self._extract_content(data)
        if content is None:
            logger.error(f"Invalid response structure from OpenAI API: {data}")
            raise InferenceError(
                "Invalid response structure from OpenAI API",
                status_code=response.status_code,
                response_data=data,
            )

        return content

    @staticmethod
    def _extract_content(data: Any) -> Optional[str]:
        """Return ``choices[0].message.content`` or None if absent."""
        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError):
            return None
        return content if isinstance(content, str) else None

    def get_model_info(self) -> Dict[str, Any]:
        """Non-secret description of the configured model."""
        return {
            'endpoint': self.endpoint,
            'deployment': self.deployment,
            'model': self.generation_config.model,
            'max_tokens': self.generation_config.max_tokens,
            'api_version': self.generation_config.api_version,
        }
