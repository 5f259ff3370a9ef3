"""Tests for screenmap.engine.geometry: rebasing, relative coordinates, alignment."""

from __future__ import annotations

import pytest

from screenmap import settings
from screenmap.engine.classifier import Category
from screenmap.engine.extractor import Candidate
from screenmap.engine.geometry import (
    collect_asset_node_ids,
    determine_alignment,
    normalize_candidate,
    resolve_screen_box,
)
from screenmap.engine.nodes import BoundingBox, DocumentNode
from tests.factories import node

SCREEN = BoundingBox(x=0, y=0, width=390, height=844)


def normalize(data, category=Category.OTHER, screen=SCREEN, **kwargs):
    cand = Candidate(node=DocumentNode.from_dict(data), category=category, order=0)
    return normalize_candidate(cand, screen, **kwargs)


class TestDetermineAlignment:

    def test_full_width_is_center(self):
        alignment = determine_alignment(0, 390, 390)
        assert alignment.horizontal == "center"
        assert (alignment.left, alignment.right) == (0, 0)

    def test_flush_right(self):
        alignment = determine_alignment(350, 40, 390)
        assert alignment.horizontal == "right"
        assert (alignment.left, alignment.right) == (350, 0)

    def test_flush_left(self):
        assert determine_alignment(16, 100, 390).horizontal == "left"

    def test_within_tolerance_is_center(self):
        # left 20, right 29: difference 9 < 10
        assert determine_alignment(20, 341, 390).horizontal == "center"

    def test_tolerance_boundary_is_not_center(self):
        # left 20, right 30: difference 10 is not < 10
        assert determine_alignment(20, 340, 390).horizontal == "left"

    def test_tolerance_override(self):
        assert determine_alignment(20, 340, 390, tolerance=11).horizontal == "center"

    def test_tolerance_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "ALIGNMENT_TOLERANCE", 0.5)
        assert determine_alignment(20, 341, 390).horizontal == "left"


class TestResolveScreenBox:

    def test_override_wins(self):
        root = DocumentNode.from_dict(node("Screen", width=390, height=844))
        override = BoundingBox(x=10, y=20, width=375, height=812)
        assert resolve_screen_box(root, override) == override

    def test_root_box(self):
        root = DocumentNode.from_dict(node("Screen", x=100, y=200, width=390, height=844))
        assert resolve_screen_box(root) == BoundingBox(100, 200, 390, 844)

    def test_default_when_missing(self):
        root = DocumentNode.from_dict({"id": "0:1", "name": "Screen", "type": "FRAME"})
        box = resolve_screen_box(root)
        assert (box.width, box.height) == (390, 844)

    def test_zero_sized_root_falls_back(self):
        root = DocumentNode.from_dict(node("Screen", width=0, height=0))
        assert resolve_screen_box(root).width == settings.DEFAULT_SCREEN_WIDTH


class TestNormalizeCandidate:

    def test_header_scenario(self):
        comp = normalize(node("Header", "COMPONENT", width=390, height=80), Category.HEADER)
        assert comp.position.to_dict() == {"x": 0, "y": 0}
        assert comp.size.to_dict() == {"width": 390, "height": 80}
        assert comp.alignment.horizontal == "center"

    def test_right_aligned_scenario(self):
        comp = normalize(node("Icon/Close", "INSTANCE", x=350, y=60, width=40, height=40))
        assert comp.alignment.horizontal == "right"
        assert comp.alignment.left == 350
        assert comp.alignment.right == 0

    def test_rebased_against_screen_origin(self):
        screen = BoundingBox(x=1000, y=500, width=390, height=844)
        comp = normalize(node("Avatar", x=1195, y=922, width=60, height=60), screen=screen)
        assert comp.position.to_dict() == {"x": 195, "y": 422}
        assert comp.relative_position.to_dict() == {"x": 0.5, "y": 0.5}

    def test_relative_values_are_not_clamped(self):
        comp = normalize(node("Bleed", x=-39, y=900, width=60, height=60))
        assert comp.position.x == -39
        assert comp.relative_position.x == pytest.approx(-0.1)
        assert comp.relative_position.y > 1.0

    def test_relative_rounded_to_two_decimals(self):
        comp = normalize(node("Thing", x=100, y=100))
        assert comp.relative_position.x == 0.26
        assert comp.relative_position.y == 0.12

    def test_missing_box_degrades_to_zeros(self):
        comp = normalize({"id": "9:1", "name": "Ghost", "type": "INSTANCE"})
        assert comp.position.to_dict() == {"x": 0, "y": 0}
        assert comp.size.to_dict() == {"width": 0, "height": 0}

    def test_malformed_box_values_degrade_to_zeros(self):
        data = node("Broken", "INSTANCE")
        data["absoluteBoundingBox"] = {"x": "abc", "y": None, "width": -5, "height": 20}
        comp = normalize(data)
        assert comp.position.to_dict() == {"x": 0, "y": 0}
        assert comp.size.width == 0

    def test_empty_screen_uses_default(self):
        comp = normalize(node("Avatar", x=195, y=422), screen=BoundingBox())
        assert comp.relative_position.to_dict() == {"x": 0.5, "y": 0.5}

    def test_invisible_flag_serialized(self):
        comp = normalize(node("5. numeric-keyboard", "INSTANCE", visible=False), Category.KEYBOARD)
        assert comp.to_dict()["visible"] is False

    def test_to_dict_shape(self):
        comp = normalize(node("Avatar", "INSTANCE", x=16, y=100, width=64, height=64,
                              node_id="7:1"))
        out = comp.to_dict()
        assert out["id"] == "7:1"
        assert out["type"] == "other"
        assert out["nodeType"] == "INSTANCE"
        assert out["alignment"] == {"horizontal": "left", "margins": {"left": 16, "right": 310}}
        assert "visible" not in out
        assert "assets" not in out


class TestAssetNodes:

    def test_collects_image_fills_and_icon_vectors(self):
        data = node("Card", "INSTANCE", node_id="8:1", children=[
            node("photo", "RECTANGLE", node_id="8:2", fills=[{"type": "IMAGE"}]),
            node("icon-star", "VECTOR", node_id="8:3"),
            node("line", "VECTOR", node_id="8:4"),
        ])
        assert collect_asset_node_ids(DocumentNode.from_dict(data)) == ("8:2", "8:3")

    def test_no_assets(self):
        assert collect_asset_node_ids(DocumentNode.from_dict(node("Plain"))) == ()


class TestHalfPixelRounding:

    def test_halves_round_up(self):
        comp = normalize(node("Button Primary", "INSTANCE", x=100.5, y=700.5,
                              width=48.5, height=40.5))
        assert comp.position.to_dict() == {"x": 101, "y": 701}
        assert comp.size.to_dict() == {"width": 49, "height": 41}

    def test_margins_round_up(self):
        # left 20.5, right 390 - 70.5 = 319.5
        alignment = determine_alignment(20.5, 50, 390)
        assert (alignment.left, alignment.right) == (21, 320)

    def test_negative_halves_round_toward_positive(self):
        comp = normalize(node("Bleed", x=-2.5, y=0))
        assert comp.position.x == -2
