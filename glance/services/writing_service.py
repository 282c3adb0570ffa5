"""
Writing Assistant - One-shot rewrites of editor text
"""

from typing import Optional
import logging

from glance.prompts.base import PromptBuilder
from glance.services.chat_service import complete_chat, require_text

logger = logging.getLogger(__name__)


class WritingService:
    """Improve, rephrase, explain or summarize a piece of editor text"""

    def __init__(self, prompt_builder: PromptBuilder = None):
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def analyze(self, prompt: Optional[str], action: Optional[str] = None) -> str:
        """
        Args:
            prompt: Selected text or free-form request
            action: Optional rewrite preset (see WRITING_ACTIONS)

        Returns:
            The model's reply

        Raises:
            ValidationError: Blank prompt
            UpstreamError: Completion failure (same mapping as chat)
        """
        prompt = require_text(prompt, "Prompt is required")

        messages = [
            {"role": "system", "content": self.prompt_builder.build_writing_system_prompt(action)},
            {"role": "user", "content": self.prompt_builder.build_writing_user_prompt(prompt, action)},
        ]

        logger.info(f"Writing assistant request (action={action or 'none'}, {len(prompt)} chars)")
        return await complete_chat(messages)
