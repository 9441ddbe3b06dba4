"""Unit tests for tolerant response decoding."""

import logging

import pytest

from keep_provider.decoding import (
    ResponseDecoder,
    UnexpectedShape,
    as_bool,
    as_choice,
    as_id,
    as_int,
    as_matchers,
    as_str,
    as_str_list,
    as_str_map,
    as_text,
)
from keep_provider.models import ExtractionRule


class TestConverters:
    """Tests for the per-field converters."""

    @pytest.mark.parametrize(
        "value, expected",
        [("abc", "abc"), (12, "12"), (12.0, "12"), (1.5, "1.5"), (True, "true")],
    )
    def test_as_str(self, value, expected):
        assert as_str(value) == expected

    def test_as_str_rejects_containers(self):
        with pytest.raises(UnexpectedShape):
            as_str({"a": 1})

    def test_as_text_empty_is_unset(self):
        assert as_text("") is None
        assert as_text("x") == "x"

    @pytest.mark.parametrize("value, expected", [(42, "42"), (42.0, "42"), ("a-b", "a-b")])
    def test_as_id(self, value, expected):
        assert as_id(value) == expected

    def test_as_id_rejects_bool(self):
        with pytest.raises(UnexpectedShape):
            as_id(True)

    @pytest.mark.parametrize("value, expected", [(5, 5), (5.0, 5), (" 7 ", 7)])
    def test_as_int(self, value, expected):
        assert as_int(value) == expected

    @pytest.mark.parametrize("value", [5.5, "five", False, None])
    def test_as_int_rejects(self, value):
        with pytest.raises(UnexpectedShape):
            as_int(value)

    def test_as_bool(self):
        assert as_bool(True) is True
        assert as_bool("False") is False
        with pytest.raises(UnexpectedShape):
            as_bool(1)

    def test_as_str_map_skips_null(self):
        assert as_str_map({"a": "x", "b": 2, "c": None}) == {"a": "x", "b": "2"}

    def test_as_str_list(self):
        assert as_str_list(["a", 1, None]) == ["a", "1"]
        with pytest.raises(UnexpectedShape):
            as_str_list("a")

    def test_as_choice(self):
        convert = as_choice(["firing", "resolved"])
        assert convert("resolved") == "resolved"
        with pytest.raises(UnexpectedShape):
            convert("exploded")


class TestMatchers:
    """Tests for the matchers shapes Keep returns."""

    def test_object(self):
        assert as_matchers({"service": "checkout", "env": "prod"}) == [
            ("service", "checkout"),
            ("env", "prod"),
        ]

    def test_pairs(self):
        assert as_matchers([["service", "checkout"], ["tier", 1]]) == [
            ("service", "checkout"),
            ("tier", "1"),
        ]

    def test_key_value_objects(self):
        assert as_matchers([{"key": "service", "value": "checkout"}]) == [("service", "checkout")]

    def test_malformed_entries_are_skipped(self):
        assert as_matchers([["only-one"], [1, "x"], "flat", ["ok", "yes"]]) == [("ok", "yes")]

    def test_scalar_is_rejected(self):
        with pytest.raises(UnexpectedShape):
            as_matchers("service=checkout")


@pytest.fixture
def decoder() -> ResponseDecoder:
    return ResponseDecoder(logging.getLogger("tests.decoding"), "extraction rule")


@pytest.fixture
def rule() -> ExtractionRule:
    return ExtractionRule(
        id="3",
        name="r1",
        description="local",
        priority=5,
        condition="true",
        attribute="service",
        regex="svc-(?P<service>.*)",
    )


FIELDS = {
    "name": as_str,
    "description": as_text,
    "priority": as_int,
    "condition": as_text,
}


class TestResponseDecoder:
    """Tests for ResponseDecoder.apply."""

    def test_present_fields_overwrite(self, decoder: ResponseDecoder, rule: ExtractionRule):
        decoded = decoder.apply(rule, {"name": "r2", "priority": 9.0}, FIELDS, keep_on_omit=FIELDS)

        assert decoded.name == "r2"
        assert decoded.priority == 9
        assert decoded.description == "local"
        assert rule.name == "r1"

    def test_null_resets_to_default(self, decoder: ResponseDecoder, rule: ExtractionRule):
        decoded = decoder.apply(rule, {"condition": None, "priority": None}, FIELDS, keep_on_omit=FIELDS)

        assert decoded.condition is None
        assert decoded.priority == 0

    def test_null_never_clears_required(self, decoder: ResponseDecoder, rule: ExtractionRule):
        decoded = decoder.apply(rule, {"name": None}, FIELDS, keep_on_omit=FIELDS)
        assert decoded.name == "r1"

    def test_bad_shape_keeps_local_value_and_warns(
        self, decoder: ResponseDecoder, rule: ExtractionRule, caplog
    ):
        with caplog.at_level(logging.WARNING, logger="tests.decoding"):
            decoded = decoder.apply(rule, {"priority": "high"}, FIELDS, keep_on_omit=FIELDS)

        assert decoded.priority == 5
        assert "priority" in caplog.text

    def test_omitted_fields_reset(self, decoder: ResponseDecoder, rule: ExtractionRule):
        decoded = decoder.apply(rule, {}, FIELDS, keep_on_omit={"condition"})

        assert decoded.description is None
        assert decoded.priority == 0
        assert decoded.condition == "true"
        assert decoded.name == "r1"

    def test_omitted_fields_kept_without_reset(self, decoder: ResponseDecoder, rule: ExtractionRule):
        decoded = decoder.apply(rule, {}, FIELDS, reset_omitted=False)
        assert decoded == rule

    def test_wire_names(self, decoder: ResponseDecoder, rule: ExtractionRule):
        decoded = decoder.apply(
            rule, {"desc": "remote"}, {"description": as_text}, wire_names={"description": "desc"}
        )
        assert decoded.description == "remote"
