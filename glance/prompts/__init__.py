"""
Prompt templates for chat and the writing assistant
"""

from glance.prompts.base import PromptBuilder

__all__ = ["PromptBuilder"]
