"""Token budget policy for generation prompts.

The policy reserves context-window capacity for the system prompt, any merged
output schema and a fixed overhead, then truncates the user prompt to fit what
is left. Token counts are estimated from character counts unless a real
estimator is supplied.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from pydantic import BaseModel

from .config import TokenBudgetConfig

logger = logging.getLogger(__name__)

TokenEstimator = Callable[[str], int]


class BudgetedPrompt(BaseModel):
    """A prompt fitted to the budget, with the numbers that shaped it."""

    prompt: str
    truncated: bool
    char_limit: int
    reserved_tokens: int
    available_tokens: int


class TokenBudget:
    """Reserve-then-truncate policy bounding prompt size."""

    def __init__(
        self,
        config: Optional[TokenBudgetConfig] = None,
        estimator: Optional[TokenEstimator] = None,
    ) -> None:
        self.config = config or TokenBudgetConfig()
        self._estimator = estimator

    def estimate_tokens(self, text: str) -> int:
        if self._estimator is not None:
            return self._estimator(text)
        return math.ceil(len(text) / self.config.chars_per_input_token)

    def reserved_tokens(self, system_prompt: str, schema_text: str = "") -> int:
        return (
            self.estimate_tokens(system_prompt)
            + self.estimate_tokens(schema_text)
            + self.config.overhead_tokens
        )

    def prompt_char_limit(self, system_prompt: str, schema_text: str = "") -> int:
        """Return the largest prompt length, in characters, the budget allows."""
        available = self.config.context_window - self.reserved_tokens(
            system_prompt, schema_text
        )
        return max(
            self.config.min_prompt_chars,
            available * self.config.chars_per_output_token,
        )

    def fit(
        self, prompt: str, system_prompt: str = "", schema_text: str = ""
    ) -> BudgetedPrompt:
        """Truncate ``prompt`` so it never exceeds the computed character limit."""
        reserved = self.reserved_tokens(system_prompt, schema_text)
        available = self.config.context_window - reserved
        char_limit = self.prompt_char_limit(system_prompt, schema_text)

        logger.debug(
            f"Token budget: system={self.estimate_tokens(system_prompt)} "
            f"schema={self.estimate_tokens(schema_text)} "
            f"overhead={self.config.overhead_tokens} available={available} "
            f"max_chars={char_limit}"
        )

        if len(prompt) <= char_limit:
            return BudgetedPrompt(
                prompt=prompt,
                truncated=False,
                char_limit=char_limit,
                reserved_tokens=reserved,
                available_tokens=available,
            )

        note = self.config.truncation_note
        keep = max(0, char_limit - len(note))
        fitted = (prompt[:keep] + note)[:char_limit]
        logger.info(f"Prompt truncated from {len(prompt)} to {len(fitted)} characters")
        return BudgetedPrompt(
            prompt=fitted,
            truncated=True,
            char_limit=char_limit,
            reserved_tokens=reserved,
            available_tokens=available,
        )
