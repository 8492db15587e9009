"""System prompt rendering and memoization."""

from datagenie.prompts.builder import build_system_prompt, render_system_prompt
from datagenie.prompts.cache import PromptCache, prompt_cache_key

__all__ = [
    "build_system_prompt",
    "render_system_prompt",
    "PromptCache",
    "prompt_cache_key",
]
