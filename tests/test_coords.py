from __future__ import annotations

from focalpoint.coords import (
    DEFAULT_POINT,
    CoordinateStore,
    FocalPoint,
    clamp,
    format_point,
    normalize,
    parse,
)


def test_parse_default_for_empty_and_none() -> None:
    assert parse("") == FocalPoint(50, 50)
    assert parse(None) == FocalPoint(50, 50)


def test_parse_format_round_trip() -> None:
    for x in range(0, 101, 5):
        for y in (0, 1, 50, 99, 100):
            p = FocalPoint(x, y)
            assert parse(format_point(p)) == p


def test_parse_is_permissive_like_integer_inputs() -> None:
    assert parse("30px, 70%") == FocalPoint(30, 70)
    assert parse(" 12 ,+8") == FocalPoint(12, 8)


def test_parse_does_not_clamp() -> None:
    assert parse("150,-20") == FocalPoint(150, -20)


def test_parse_malformed_falls_back_to_default() -> None:
    for raw in ("abc", "30", "30,", ",70", "1,2,3", "x,y"):
        assert parse(raw) == DEFAULT_POINT, raw


def test_format_and_normalize() -> None:
    assert format_point(FocalPoint(30, 70)) == "30,70"
    assert clamp(FocalPoint(150, -20)) == FocalPoint(100, 0)
    assert normalize("150,-20") == "100,0"
    assert normalize("") == "50,50"


def test_store_notifies_only_on_change() -> None:
    store = CoordinateStore("10,10")
    seen = []
    store.subscribe(seen.append)

    assert store.set_value("20,30") is True
    assert store.set_value("20,30") is False
    assert seen == ["20,30"]
    assert store.point() == FocalPoint(20, 30)

    store.unsubscribe(seen.append)
    store.set_value("40,40")
    assert seen == ["20,30"]


def test_store_error_and_visibility() -> None:
    store = CoordinateStore("", error="Out of range")
    assert store.has_error()
    assert store.is_visible()
    store.set_visible(False)
    assert not store.is_visible()
    assert not CoordinateStore().has_error()
