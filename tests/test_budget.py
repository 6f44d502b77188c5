"""Token budget tests."""

from browseflow.budget import TokenBudget
from browseflow.config import TokenBudgetConfig
from browseflow.constants import TRUNCATION_NOTE


def test_estimate_tokens_rounds_up():
    budget = TokenBudget()
    assert budget.estimate_tokens("") == 0
    assert budget.estimate_tokens("abcd") == 1
    assert budget.estimate_tokens("abcde") == 2


def test_default_char_limit():
    budget = TokenBudget()
    assert budget.reserved_tokens("") == 100
    assert budget.prompt_char_limit("") == (4096 - 100) * 3


def test_short_prompt_is_untouched():
    fitted = TokenBudget().fit("hello", system_prompt="Be brief")
    assert fitted.prompt == "hello"
    assert not fitted.truncated


def test_long_prompt_is_truncated_with_note():
    budget = TokenBudget()
    fitted = budget.fit("a" * 20000)

    assert fitted.truncated
    assert len(fitted.prompt) == fitted.char_limit == 11988
    assert fitted.prompt.endswith(TRUNCATION_NOTE)


def test_reservation_never_drops_below_floor():
    budget = TokenBudget()
    system_prompt = "s" * 20000
    schema = "{}" * 2000

    fitted = budget.fit("p" * 5000, system_prompt=system_prompt, schema_text=schema)

    assert fitted.available_tokens < 0
    assert fitted.char_limit == 1000
    assert len(fitted.prompt) <= 1000


def test_schema_reduces_available_space():
    budget = TokenBudget()
    plain = budget.prompt_char_limit("sys")
    with_schema = budget.prompt_char_limit("sys", '{"type": "object"}' * 20)
    assert with_schema < plain


def test_custom_estimator_and_config():
    config = TokenBudgetConfig(context_window=1000, overhead_tokens=0)
    budget = TokenBudget(config, estimator=len)

    assert budget.reserved_tokens("x" * 100, "y" * 50) == 150
    assert budget.prompt_char_limit("x" * 100, "y" * 50) == (1000 - 150) * 3
