"""
Test suite for token estimation and output budgeting.

System role: Verification of chunking thresholds and max-output-token budgets
"""

from pagecraft.core.pipeline.token_estimator import compute_output_budget, estimate_tokens


class TestEstimateTokens:
    """Test suite for estimate_tokens."""

    def test_empty_text_should_cost_zero(self) -> None:
        assert estimate_tokens("") == 0

    def test_should_round_up_partial_tokens(self) -> None:
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_should_scale_with_length(self) -> None:
        assert estimate_tokens("x" * 50_000) == 12_500

    def test_should_honor_custom_ratio(self) -> None:
        assert estimate_tokens("x" * 10, chars_per_token=3) == 4


class TestComputeOutputBudget:
    """Test suite for compute_output_budget."""

    def test_should_scale_with_input_and_multiplier(self) -> None:
        # 4000 chars = 1000 tokens, x2
        budget = compute_output_budget("x" * 4000, output_multiplier=2.0, ceiling=9999)

        assert budget == 2000

    def test_small_input_should_get_floor(self) -> None:
        budget = compute_output_budget("hello", output_multiplier=2.0, ceiling=9999, floor=1024)

        assert budget == 1024

    def test_large_input_should_be_capped_at_ceiling(self) -> None:
        budget = compute_output_budget("x" * 80_000, output_multiplier=2.0, ceiling=9999)

        assert budget == 9999

    def test_should_not_exceed_remaining_context(self) -> None:
        # 9000 input tokens + 500 margin leaves 500 of a 10000 window
        budget = compute_output_budget(
            "x" * 36_000,
            output_multiplier=2.0,
            ceiling=9999,
            context_window_tokens=10_000,
            safety_margin_tokens=500,
        )

        assert budget == 500

    def test_should_account_for_system_prompt(self) -> None:
        with_system = compute_output_budget(
            "x" * 36_000,
            output_multiplier=2.0,
            ceiling=9999,
            system_prompt="s" * 400,
            context_window_tokens=10_000,
            safety_margin_tokens=500,
        )

        assert with_system == 400

    def test_should_never_return_less_than_one(self) -> None:
        budget = compute_output_budget(
            "x" * 40_000,
            output_multiplier=1.0,
            ceiling=9999,
            context_window_tokens=1_000,
        )

        assert budget == 1
