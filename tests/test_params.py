"""
Unit tests for matcher argument normalization.

Tests libs/perf_metrics/params.py
"""

import pytest

from libs.core.exceptions import InvalidParameters
from libs.perf_metrics.params import (
    DEFAULT_OPTIONS,
    MatcherOptions,
    merge_options,
    normalize_matcher_argument,
)


def action():
    pass


def reset():
    pass


async def async_action():
    pass


class TestNormalizeShapes:
    """Test every accepted argument shape."""

    def test_bare_action(self):
        params = normalize_matcher_argument(action)
        assert params.action is action
        assert params.reset_action is None
        assert params.options.repeats == 1

    def test_bare_coroutine_function(self):
        params = normalize_matcher_argument(async_action)
        assert params.action is async_action

    def test_single_element_tuple(self):
        params = normalize_matcher_argument((action,))
        assert params.action is action
        assert params.reset_action is None
        assert params.options == DEFAULT_OPTIONS

    def test_action_and_reset(self):
        params = normalize_matcher_argument((action, reset))
        assert params.reset_action is reset
        assert params.options.repeats == 1

    def test_action_reset_options(self):
        params = normalize_matcher_argument([action, reset, {"repeats": 4}])
        assert params.action is action
        assert params.reset_action is reset
        assert params.options.repeats == 4

    def test_action_and_options_shorthand(self):
        params = normalize_matcher_argument((action, {"repeats": 2}))
        assert params.action is action
        assert params.reset_action is None
        assert params.options.repeats == 2

    def test_options_model_instance(self):
        params = normalize_matcher_argument((action, MatcherOptions(repeats=3)))
        assert params.options.repeats == 3

    def test_none_placeholder_for_reset(self):
        params = normalize_matcher_argument((action, None, {"repeats": 5}))
        assert params.reset_action is None
        assert params.options.repeats == 5

    def test_custom_defaults(self):
        params = normalize_matcher_argument(action, MatcherOptions(repeats=7))
        assert params.options.repeats == 7


class TestMergeOptions:
    """Test shallow option merging."""

    def test_empty_options_keep_defaults(self):
        assert merge_options({}).repeats == 1

    def test_caller_key_overrides_default(self):
        assert merge_options({"repeats": 9}, MatcherOptions(repeats=2)).repeats == 9

    def test_unset_key_keeps_custom_default(self):
        merged = merge_options({"warmup": True}, MatcherOptions(repeats=2))
        assert merged.repeats == 2

    def test_unknown_keys_are_preserved(self):
        merged = merge_options({"warmup": True})
        assert merged.model_dump()["warmup"] is True

    def test_options_instance_only_overrides_what_it_set(self):
        merged = merge_options(MatcherOptions(warmup=True), MatcherOptions(repeats=6))
        assert merged.repeats == 6


class TestInvalidParameters:
    """Test malformed shapes are rejected before anything runs."""

    def test_non_callable_first_element(self):
        with pytest.raises(InvalidParameters) as exc_info:
            normalize_matcher_argument([42])
        assert "42" in str(exc_info.value)
        assert exc_info.value.argument == [42]

    def test_not_a_tuple_or_callable(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument("click")

    def test_empty_tuple(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument(())

    def test_too_many_elements(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, reset, {}, {}))

    def test_second_element_wrong_type(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, 3))

    def test_third_element_after_options(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, {"repeats": 2}, {"repeats": 3}))

    def test_third_element_not_options(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, reset, "fast"))

    def test_invalid_repeats(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, {"repeats": "lots"}))

    def test_negative_repeats(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, {"repeats": -1}))

    def test_bool_repeats_not_coerced(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, {"repeats": True}))

    def test_numeric_string_repeats_not_coerced(self):
        with pytest.raises(InvalidParameters):
            normalize_matcher_argument((action, reset, {"repeats": "3"}))

    def test_message_renders_argument(self):
        with pytest.raises(InvalidParameters) as exc_info:
            normalize_matcher_argument([42])
        assert str(exc_info.value).startswith(
            "Invalid parameters: expect([fn, fn, opts]) got expect([42])"
        )
