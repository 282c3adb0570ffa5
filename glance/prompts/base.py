"""
Prompt Builder - System prompts rendered from Jinja2 templates
"""

from pathlib import Path
from typing import List, Optional
import logging

import tiktoken
from jinja2 import Environment, FileSystemLoader, select_autoescape

from glance.config import settings, WRITING_ACTIONS

logger = logging.getLogger(__name__)


class PromptBuilder:
    """
    Builds chat and writing-assistant prompts.

    Retrieved context is joined with blank lines and cut to a token budget
    (cl100k_base) so the prompt stays within the model's context window.
    """

    def __init__(self, context_max_tokens: int = settings.CHAT_CONTEXT_MAX_TOKENS):
        templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.context_max_tokens = context_max_tokens
        self._tokenizer = None

    @property
    def tokenizer(self):
        # Lazy: the encoding file is fetched on first use
        if self._tokenizer is None:
            self._tokenizer = tiktoken.get_encoding("cl100k_base")
        return self._tokenizer

    def build_context(self, chunks: List[str]) -> str:
        """Join retrieved windows and truncate to the token budget"""
        context = "\n\n".join(chunk.strip() for chunk in chunks if chunk and chunk.strip())

        tokens = self.tokenizer.encode(context)
        if len(tokens) <= self.context_max_tokens:
            return context

        logger.debug(f"Context truncated from {len(tokens)} to {self.context_max_tokens} tokens")
        return self.tokenizer.decode(tokens[:self.context_max_tokens])

    def build_chat_system_prompt(self, title: str, chunks: List[str]) -> str:
        template = self.env.get_template("chat_system.jinja2")
        return template.render(title=title, context=self.build_context(chunks))

    def build_writing_system_prompt(self, action: Optional[str] = None) -> str:
        template = self.env.get_template("writing_system.jinja2")
        return template.render(action=action)

    @staticmethod
    def build_writing_user_prompt(prompt: str, action: Optional[str] = None) -> str:
        """Prefix the editor selection with the instruction of its rewrite preset"""
        if action:
            return f"{WRITING_ACTIONS[action]}{prompt}"
        return prompt
