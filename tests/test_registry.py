"""Tests for tinct_registry: the Color record, KnownColors and the IPT_HQ sync."""

import threading

import pytest

from tinct_colortools import alpha, from_rgba8888, intensity, protan, tritan
from tinct_registry import (
    DEFAULT_KNOWN_COLORS,
    KNOWN_COLORS,
    Color,
    ColorRegistry,
    KnownColors,
    append_to_known_colors,
    edit_known_colors,
    from_color,
    to_color,
)


class TestColor:
    def test_clamps(self):
        c = Color(-1.0, 2.0, 0.5, 1.5)
        assert c.as_tuple() == (0.0, 1.0, 0.5, 1.0)

    def test_rgba8888_roundtrip(self):
        for code in (0x00000000, 0xFF7F00FF, 0x12345678, 0xFFFFFFFF):
            assert Color.from_rgba8888(code).to_rgba8888() == code

    def test_set_returns_self(self):
        c = Color()
        assert c.set(0.1, 0.2, 0.3, 0.4) is c
        assert c.as_tuple() == (0.1, 0.2, 0.3, 0.4)

    def test_copy_is_independent(self):
        a = Color(0.1, 0.2, 0.3)
        b = a.copy()
        b.set(0.9, 0.9, 0.9, 0.9)
        assert a.r == 0.1

    def test_equality_and_hash(self):
        assert Color(0.5, 0.5, 0.5) == Color(0.5, 0.5, 0.5)
        assert hash(Color(0.5, 0.5, 0.5)) == hash(Color(0.5, 0.5, 0.5))
        assert Color(0.5, 0.5, 0.5) != Color(0.5, 0.5, 0.4)

    def test_no_instance_dict(self):
        with pytest.raises(AttributeError):
            Color().extra = 1

    def test_packed_conversion(self):
        orange = from_rgba8888(0xFF7F00FF)
        assert from_color(Color.from_rgba8888(0xFF7F00FF)) == orange
        back = to_color(orange)
        assert back.r > 0.95
        assert back.a == pytest.approx(1.0)


class TestKnownColors:
    def test_defaults_loaded(self, registry):
        assert len(registry) == len(DEFAULT_KNOWN_COLORS)
        assert registry["RED"].to_rgba8888() == 0xFF0000FF

    def test_protocol(self, registry):
        assert isinstance(registry, ColorRegistry)
        assert isinstance({}, ColorRegistry)

    def test_rejects_non_color(self, registry):
        with pytest.raises(TypeError):
            registry["BAD"] = 0xFF0000FF

    def test_reset(self, registry):
        registry["EXTRA"] = Color()
        del registry["RED"]
        registry.reset()
        assert "EXTRA" not in registry
        assert "RED" in registry

    def test_explicit_contents(self):
        reg = KnownColors({"ONLY": Color(1.0, 0.0, 0.0)})
        assert list(reg) == ["ONLY"]

    def test_global_instance(self):
        assert isinstance(KNOWN_COLORS, KnownColors)

    def test_concurrent_writes(self, registry):
        def writer(prefix):
            for k in range(200):
                registry[f"{prefix}{k}"] = Color(k / 200.0)

        threads = [threading.Thread(target=writer, args=(p,)) for p in "ABCD"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry) == len(DEFAULT_KNOWN_COLORS) + 800

    def test_items_is_a_snapshot(self, registry):
        items = registry.items()
        keys = registry.keys()
        registry["LATE"] = Color(0.5)
        assert "LATE" not in dict(items)
        assert "LATE" not in keys
        assert "LATE" in registry.snapshot()

    def test_iteration_survives_writes(self, registry):
        for name in registry:
            registry[name + "_COPY"] = registry[name]
        assert len(registry) == 2 * len(DEFAULT_KNOWN_COLORS)

    def test_lock_blocks_other_writers(self, registry):
        writer = threading.Thread(target=registry.__setitem__, args=("WAITING", Color(1.0)))
        with registry.lock:
            writer.start()
            writer.join(timeout=0.2)
            assert writer.is_alive()
            assert "WAITING" not in registry
        writer.join()
        assert "WAITING" in registry

    def test_sync_holds_lock(self, registry):
        seen = []

        def reader():
            seen.append(registry["RED"])

        with registry.lock:
            t = threading.Thread(target=reader)
            t.start()
            edit_known_colors(registry)
            assert not seen
        t.join()
        expected = from_rgba8888(0xFF0000FF)
        assert seen[0] == Color(intensity(expected), protan(expected), tritan(expected), 1.0)


class TestEditKnownColors:
    def test_converts_every_entry(self, registry):
        original = {name: color.copy() for name, color in registry.items()}
        count = edit_known_colors(registry)
        assert count == len(original)
        assert set(registry.keys()) == set(original)
        for name, before in original.items():
            packed = from_color(before)
            after = registry[name]
            assert after.r == pytest.approx(intensity(packed))
            assert after.g == pytest.approx(protan(packed))
            assert after.b == pytest.approx(tritan(packed))
            assert after.a == before.a

    def test_replaces_objects(self, registry):
        old = registry["WHITE"]
        edit_known_colors(registry)
        assert registry["WHITE"] is not old
        assert old.to_rgba8888() == 0xFFFFFFFF

    def test_plain_dict(self):
        reg = {"RED": Color.from_rgba8888(0xFF0000FF)}
        assert edit_known_colors(reg) == 1
        assert reg["RED"].g > 0.75


class TestAppendToKnownColors:
    def test_one_color_per_name(self, registry):
        palette = {
            "Orange": from_rgba8888(0xFF7F00FF),
            "Half Red": from_rgba8888(0xFF000080),
        }
        assert append_to_known_colors(palette, registry) == 2
        for name, packed in palette.items():
            c = registry[name]
            assert c.as_tuple() == pytest.approx(
                (intensity(packed), protan(packed), tritan(packed), alpha(packed)))

    def test_replaces_existing(self, registry):
        append_to_known_colors({"RED": from_rgba8888(0x00FF00FF)}, registry)
        assert registry["RED"].r == pytest.approx(intensity(from_rgba8888(0x00FF00FF)))

    def test_empty(self, registry):
        assert append_to_known_colors({}, registry) == 0
        assert len(registry) == len(DEFAULT_KNOWN_COLORS)
