"""Tests for screenmap.engine.classifier: name rules, kind and structural fallbacks."""

from __future__ import annotations

import pytest

from screenmap.engine.classifier import Category, classify_node, match_name_rule
from screenmap.engine.nodes import DocumentNode
from tests.factories import node, text


def classify(data) -> Category:
    return classify_node(DocumentNode.from_dict(data))


class TestExactNames:

    @pytest.mark.parametrize("name", ["1. status-bar", "2. home-indicator"])
    def test_illustrative_chrome_is_excluded(self, name):
        assert classify(node(name, "INSTANCE")) == Category.EXCLUDED

    @pytest.mark.parametrize("name", ["4. alphabetic-keyboard", "5. numeric-keyboard"])
    def test_keyboard_containers(self, name):
        assert classify(node(name, "INSTANCE", width=390, height=291)) == Category.KEYBOARD

    def test_exact_match_is_case_sensitive(self):
        # Not the exact container name, but still caught by the "keyboard" keyword
        assert classify(node("4. Alphabetic-Keyboard")) == Category.KEYBOARD


class TestNameRules:

    @pytest.mark.parametrize("name,expected", [
        ("Button Primary", Category.BUTTON),
        ("Header", Category.HEADER),
        ("nav/status-bar-dark", Category.HEADER),
        ("Input Email", Category.INPUT),
        ("Password Field", Category.INPUT),
        ("Onboarding/Default", Category.ONBOARDING_INPUT),
        ("Custom Keyboard", Category.KEYBOARD),
        ("Icon/Close", Category.ICON),
        ("Ícone voltar", Category.ICON),
        ("Body Text", Category.TEXT),
    ])
    def test_keyword_table(self, name, expected):
        assert match_name_rule(name) == expected

    def test_first_match_wins(self):
        # "button" is listed before "icon"
        assert match_name_rule("Icon Button") == Category.BUTTON
        assert match_name_rule("Header Text") == Category.HEADER

    def test_no_match(self):
        assert match_name_rule("Rectangle 12") is None
        assert match_name_rule("") is None


class TestFallbacks:

    def test_text_kind_without_name_match(self):
        assert classify(text("Title", "Welcome back")) == Category.TEXT

    def test_wide_short_frame_is_button(self):
        # ratio 300/48 = 6.25 > 2, height < 60
        assert classify(node("Frame 12", "FRAME", width=300, height=48)) == Category.BUTTON

    def test_very_wide_tall_frame_is_divider(self):
        # height >= 60 so the button rule does not apply; ratio 900/100 = 9 > 8
        assert classify(node("Frame 9", "FRAME", width=900, height=100)) == Category.EXCLUDED

    def test_small_frame_with_text_is_label(self):
        data = node("Frame 3", "COMPONENT", width=60, height=36,
                    children=[text("t", "Hi", width=40, height=16)])
        assert classify(data) == Category.LABEL

    def test_square_frame_without_text_is_other(self):
        assert classify(node("Avatar", "FRAME", width=64, height=64)) == Category.OTHER

    def test_structural_rules_skip_non_frame_kinds(self):
        assert classify(node("Rectangle 1", "RECTANGLE", width=300, height=2)) == Category.OTHER

    def test_unnamed_node_is_unknown(self):
        assert classify(node("", "GROUP", width=64, height=64)) == Category.UNKNOWN

    def test_zero_height_frame_does_not_divide_by_zero(self):
        assert classify(node("Spacer", "FRAME", width=100, height=0)) == Category.OTHER
