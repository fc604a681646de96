from __future__ import annotations

import pytest

from vidsections.models import UNPARSED
from vidsections.parse.time_values import (
    MAX_SECONDS,
    field_extractor,
    first_parsed,
    parse_boundary,
    parse_iso_duration,
    parse_milliseconds,
    parse_seconds,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, 0),
        (7, 7),
        (-3, UNPARSED),
        (12.9, 12),
        (-0.5, UNPARSED),
        (float("nan"), UNPARSED),
        (float("inf"), UNPARSED),
        ("  42 ", 42),
        ("12.9", 12),
        ("1e3", 1000),
        ("-5", UNPARSED),
        ("1500ms", 1),
        ("999ms", 0),
        ("PT1H2M3S", 3723),
        ("abc", UNPARSED),
        ("inf", UNPARSED),
        ("", UNPARSED),
        (None, UNPARSED),
        (True, UNPARSED),
        ({"seconds": 5}, UNPARSED),
    ],
)
def test_parse_seconds_normalizes_heterogeneous_values(value: object, expected: int) -> None:
    assert parse_seconds(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2500, 2),
        (999.9, 0),
        ("3000", 3),
        (" 61000 ", 61),
        (-1, UNPARSED),
        (float("inf"), UNPARSED),
        ("12 ms", UNPARSED),
        (None, UNPARSED),
    ],
)
def test_parse_milliseconds_floors_to_whole_seconds(value: object, expected: int) -> None:
    assert parse_milliseconds(value) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("PT45S", 45),
        ("PT1M", 60),
        ("PT2H", 7200),
        ("PT1M30.75S", 90),
        ("PT0.5S", 0),
        ("PT-5S", UNPARSED),
        ("PT-0.5S", UNPARSED),
        ("PT1H-30M", 1800),
        ("PT", UNPARSED),
        ("P1D", UNPARSED),
        ("PT1X", UNPARSED),
    ],
)
def test_parse_iso_duration(text: str, expected: int) -> None:
    assert parse_iso_duration(text) == expected


def test_parse_iso_duration_saturates_instead_of_overflowing() -> None:
    assert parse_iso_duration("PT99999999999H") == MAX_SECONDS


@pytest.mark.parametrize(
    ("node", "expected"),
    [
        (12, 12),
        ("PT1M", 60),
        ({"offsetMs": 61000}, 61),
        ({"seconds": "bad", "offsetSeconds": 7}, 7),
        ({"seconds": 3, "offsetMs": 9000}, 3),
        ({"ms": "4500"}, 4),
        ({}, UNPARSED),
        (None, UNPARSED),
        ([1, 2], UNPARSED),
    ],
)
def test_parse_boundary_uses_field_priority(node: object, expected: int) -> None:
    assert parse_boundary(node) == expected


def test_first_parsed_returns_first_success_and_skips_later_extractors() -> None:
    calls: list[str] = []

    def failing(_value: object) -> int:
        calls.append("failing")
        return UNPARSED

    def succeeding(_value: object) -> int:
        calls.append("succeeding")
        return 9

    def never(_value: object) -> int:
        calls.append("never")
        return 1

    assert first_parsed([failing, succeeding, never], object()) == 9
    assert calls == ["failing", "succeeding"]


def test_field_extractor_ignores_non_mapping_nodes() -> None:
    extract = field_extractor("seconds", parse_seconds)

    assert extract({"seconds": 4}) == 4
    assert extract(4) == UNPARSED
