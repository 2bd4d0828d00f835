"""
Token estimation and output budgeting.

Approximates model token cost from character length. This is a heuristic
(characters / 4), not the remote tokenizer, and carries no dependency on
model-specific tokenization tables.

Dependencies: math (stdlib)
System role: Chunking threshold checks and max-output-token budgeting
"""

import math

DEFAULT_CHARS_PER_TOKEN = 4


def estimate_tokens(text: str, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """
    Estimate the token cost of a text blob.

    Args:
        text: Text to measure
        chars_per_token: Average characters per model token

    Returns:
        int: ceil(len(text) / chars_per_token)
    """
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


def compute_output_budget(
    input_text: str,
    *,
    output_multiplier: float,
    ceiling: int,
    system_prompt: str = "",
    context_window_tokens: int = 128000,
    safety_margin_tokens: int = 500,
    floor: int = 1024,
    chars_per_token: int = DEFAULT_CHARS_PER_TOKEN,
) -> int:
    """
    Compute the max output tokens for one model call.

    The budget grows with the input (HTML and CSS output is larger than the
    plain text it came from), is capped by the task ceiling, and never claims
    more than the context window leaves after the system prompt, the input and
    a safety margin.

    Args:
        input_text: User prompt sent with the call
        output_multiplier: Expected output tokens per input token for the task
        ceiling: Task-specific hard cap
        system_prompt: System instructions sent with the call
        context_window_tokens: Model context window
        safety_margin_tokens: Tokens kept free for message framing
        floor: Smallest budget ever returned
        chars_per_token: Estimator ratio

    Returns:
        int: Output token budget
    """
    input_tokens = estimate_tokens(input_text, chars_per_token)
    system_tokens = estimate_tokens(system_prompt, chars_per_token)

    wanted = math.ceil(input_tokens * output_multiplier)
    remaining = context_window_tokens - input_tokens - system_tokens - safety_margin_tokens

    budget = min(ceiling, max(floor, wanted), remaining)
    return max(1, budget)
