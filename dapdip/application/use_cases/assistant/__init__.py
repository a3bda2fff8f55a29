"""AI assistant use cases."""

from .complete_prompt import complete_prompt, estimate_prompt_cost

__all__ = ["complete_prompt", "estimate_prompt_cost"]
