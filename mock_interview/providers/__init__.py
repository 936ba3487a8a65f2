"""LLM providers for the Mock Interview proxy."""

from .openai_provider import OpenAIProvider, build_question_prompt, build_score_prompt

__all__ = ["OpenAIProvider", "build_question_prompt", "build_score_prompt"]
