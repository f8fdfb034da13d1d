"""
Prompt Builder

Builds the chat messages sent to the model for a single file review.
"""

import logging
from typing import Dict, List


logger = logging.getLogger(__name__)


class PromptBuilder:
    """
    Builds chat prompts for review generation.

    The whole file is embedded verbatim. Nothing is chunked or
    summarized, so very large files may exceed the model's context.
    """

    def __init__(self, language: str = "TypeScript", framework: str = "NestJS"):
        """
        Initialize prompt builder.

        Args:
            language: Language of the reviewed codebase
            framework: Framework of the reviewed codebase
        """
        self.language = language
        self.framework = framework

    @property
    def stack(self) -> str:
        if self.framework:
            return f"{self.language}/{self.framework}"
        return self.language

    def build_system_prompt(self) -> str:
        return f"You are a senior {self.framework or self.language} code reviewer."

    def build_review_prompt(self, code: str) -> str:
        """Build the user instruction embedding the file content."""
        return (
            f"Analyze the following {self.stack} code for best practices, "
            f"security vulnerabilities, and performance optimizations. "
            f"Provide a detailed review:\n\n{code}"
        )

    def build_messages(self, code: str) -> List[Dict[str, str]]:
        """
        Build the chat messages for one file.

        Args:
            code: File content to review

        Returns:
            System and user messages in chat-completions format
        """
        logger.debug(f"Building review prompt ({len(code)} chars)")
        return [
            {'role': 'system', 'content': self.build_system_prompt()},
            {'role': 'user', 'content': self.build_review_prompt(code)},
        ]
