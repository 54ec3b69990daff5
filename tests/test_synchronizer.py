from __future__ import annotations

import pytest

from focalpoint.coords import CoordinateStore
from focalpoint.geometry import ImageDimensions
from focalpoint.preview import PreviewRegistry
from focalpoint.sync import Synchronizer


class FakeIndicator:
    def __init__(self):
        self.pos = (0.0, 0.0)
        self.moves = 0

    def position(self):
        return self.pos

    def move_to(self, left, top):
        self.pos = (left, top)
        self.moves += 1


class FakeImage:
    def __init__(self, size=(200, 100), *, loaded=True, source=None):
        self.size = size
        self.loaded = loaded
        self._source = source
        self._pending = []

    def rendered_size(self):
        return self.size if self.loaded else (0, 0)

    def source(self):
        return self._source

    def is_loaded(self):
        return self.loaded

    def on_ready(self, callback):
        self._pending.append(callback)

    def finish_loading(self):
        self.loaded = True
        pending, self._pending = self._pending, []
        for cb in pending:
            cb()


class FakeLink:
    focal_point_id = "fp1"

    def __init__(self, href):
        self._href = href

    def href(self):
        return self._href

    def set_href(self, href):
        self._href = href


def _make(value="", *, image=None, error=None, link=None, registry=None, probe=None):
    indicator = FakeIndicator()
    image = image or FakeImage()
    field = CoordinateStore(value, error=error)
    sync = Synchronizer(indicator, image, field, preview_link=link, registry=registry, probe=probe)
    return sync, indicator, image, field


def test_attach_places_indicator_from_default_value() -> None:
    sync, indicator, _, field = _make("")
    assert sync.attach() is True
    assert indicator.pos == pytest.approx((100.0, 50.0))
    assert field.value() == "50,50"
    assert not field.is_visible()


def test_attach_is_idempotent() -> None:
    sync, indicator, _, field = _make("30,70")
    assert sync.attach() is True
    moves = indicator.moves
    assert sync.attach() is False
    assert indicator.moves == moves

    field.set_value("10,10")
    # One subscription: a single re-render per change.
    assert indicator.moves == moves + 1


def test_field_with_error_stays_visible() -> None:
    sync, _, _, field = _make("150,0", error="Value out of range")
    sync.attach()
    assert field.is_visible()


def test_drag_end_at_corners() -> None:
    sync, indicator, _, field = _make("50,50")
    sync.attach()

    indicator.move_to(200, 100)
    sync.on_drag_end()
    assert field.value() == "100,100"

    indicator.move_to(0, 0)
    sync.on_drag_end()
    assert field.value() == "0,0"


def test_click_moves_indicator_and_writes_field() -> None:
    sync, indicator, _, field = _make("50,50")
    sync.attach()

    sync.on_click(59.6, 30.2)
    assert field.value() == "30,30"
    assert indicator.pos == pytest.approx((60.0, 30.0))


def test_external_change_moves_indicator_and_preview_link() -> None:
    registry = PreviewRegistry()
    registry.register("fp1-preview-link", "/preview/7/50%2C50")
    link = FakeLink("/preview/7/50%2C50")
    sync, indicator, _, field = _make("50,50", link=link, registry=registry)
    sync.attach()

    field.set_value("30,70")

    assert indicator.pos == pytest.approx((60.0, 70.0))
    assert link.href() == "/preview/7/30%2C70"
    req = registry.get("fp1-preview-link")
    assert req.url == "/preview/7/30%2C70"
    assert req.options["url"] == "/preview/7/30%2C70"


def test_out_of_range_value_is_clamped_and_rewritten() -> None:
    sync, indicator, _, field = _make("50,50")
    sync.attach()
    seen = []
    field.subscribe(seen.append)

    field.set_value("150,-20")

    assert field.value() == "100,0"
    assert indicator.pos == pytest.approx((200.0, 0.0))
    # The rewrite is delivered while the original change is still being dispatched.
    assert sorted(seen) == ["100,0", "150,-20"]


def test_malformed_value_falls_back_to_centre() -> None:
    sync, indicator, _, field = _make("abc")
    sync.attach()
    assert field.value() == "50,50"
    assert indicator.pos == pytest.approx((100.0, 50.0))


def test_indicator_field_round_trip_does_not_notify() -> None:
    sync, _, _, field = _make("33,67", image=FakeImage((317, 211)))
    sync.attach()
    seen = []
    field.subscribe(seen.append)

    sync.set_indicator_from_field()
    sync.set_field_from_indicator()

    assert field.value() == "33,67"
    assert seen == []


def test_placement_waits_for_image_ready() -> None:
    image = FakeImage(loaded=False)
    sync, indicator, _, field = _make("30,70", image=image)
    sync.attach()
    assert indicator.moves == 0

    image.finish_loading()
    assert indicator.pos == pytest.approx((60.0, 70.0))


def test_hidden_image_uses_intrinsic_size() -> None:
    image = FakeImage(loaded=True, source="photo.jpg")
    image.size = (0, 0)
    sync, indicator, _, _ = _make("50,50", image=image, probe=lambda src: ImageDimensions(400, 200))
    sync.attach()
    assert indicator.pos == pytest.approx((200.0, 100.0))


def test_degenerate_image_keeps_field_and_anchors_at_origin() -> None:
    image = FakeImage(size=(0, 0))
    sync, indicator, _, field = _make("30,70", image=image)
    sync.attach()
    assert indicator.pos == pytest.approx((0.0, 0.0))

    indicator.move_to(10, 10)
    assert sync.set_field_from_indicator() is None
    assert field.value() == "30,70"


def test_toggle_field_visibility() -> None:
    sync, _, _, field = _make("50,50")
    sync.attach()
    assert sync.toggle_field() is True
    assert field.is_visible()
    assert sync.toggle_field() is False
    assert not field.is_visible()


def test_detach_stops_following_the_field() -> None:
    sync, indicator, _, field = _make("50,50")
    sync.attach()
    sync.detach()
    field.set_value("10,10")
    assert indicator.pos == pytest.approx((100.0, 50.0))
    assert not sync.attached
