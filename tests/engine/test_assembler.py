"""End-to-end tests for screenmap.engine.assembler."""

from __future__ import annotations

import pytest

from screenmap.engine import (
    InvalidDocumentError,
    UnresolvedReferenceError,
    build_screen,
    resolve_document,
)
from tests.factories import node, screen, text


def login_screen():
    return screen([
        node("1. status-bar", "INSTANCE", width=390, height=44, node_id="1:100",
             children=[text("time", "9:41", node_id="1:101")]),
        node("Header", "COMPONENT", width=390, height=80, node_id="1:102",
             children=[node("Back", "INSTANCE", x=16, y=30, width=24, height=24,
                            node_id="1:103")]),
        node("Input Email", "INSTANCE", x=20, y=200, width=350, height=56, node_id="1:104",
             children=[text("placeholder", "E-mail", node_id="1:105")]),
        node("Input Password", "INSTANCE", x=20, y=270, width=350, height=56,
             node_id="1:106"),
        node("Button Primary", "INSTANCE", x=20, y=700, width=350, height=48,
             node_id="1:107", children=[
                 node("Button Label Wrapper", "INSTANCE", node_id="1:108",
                      children=[text("label", "Sign in", node_id="1:109")]),
             ]),
        node("Button Secondary", "INSTANCE", x=20, y=760, width=350, height=48,
             node_id="1:110"),
        node("2. home-indicator", "INSTANCE", y=810, width=390, height=34, node_id="1:111"),
    ])


class TestBuildScreen:

    def test_login_screen(self):
        result = build_screen(login_screen())
        screen_dict = result.to_dict()["screen"]

        assert screen_dict["name"] == "Login"
        assert screen_dict["size"] == {"width": 390, "height": 844}

        ordered = screen_dict["layout"]["orderedElements"]
        assert [c["id"] for c in ordered] == ["1:102", "1:104", "1:106", "1:107", "1:110"]

        sections = screen_dict["layout"]["sections"]
        assert [s["title"] for s in sections] == ["Header", "Input", "Button"]
        assert [len(s["components"]) for s in sections] == [1, 2, 2]

        elements = screen_dict["elements"]
        assert elements["header"]["id"] == "1:102"
        assert [c["id"] for c in elements["inputs"]] == ["1:104", "1:106"]
        assert [c["id"] for c in elements["buttons"]] == ["1:107", "1:110"]
        assert "keyboard" not in elements

    def test_button_text_comes_from_nested_label(self):
        result = build_screen(login_screen())
        button = next(c for c in result.screen.ordered_elements if c.id == "1:107")
        assert button.properties["text"] == "Sign in"

    def test_component_ids_unique(self):
        result = build_screen(login_screen())
        ids = [c.id for c in result.screen.ordered_elements]
        assert len(ids) == len(set(ids))
        section_ids = [c.id for s in result.screen.sections for c in s.components]
        assert sorted(section_ids) == sorted(ids)

    def test_envelope(self):
        result = build_screen(login_screen(), source_id="abc123")
        out = result.to_dict()
        assert out["version"] == "1.0"
        assert out["sourceId"] == "abc123"
        assert out["componentsCount"] == 5
        assert out["timestamp"]

    def test_keyboard_screen(self):
        keys = [node(f"Key {i}", "INSTANCE", y=600, width=30, height=40) for i in range(30)]
        doc = screen([node("4. alphabetic-keyboard", "INSTANCE", y=553, width=390,
                           height=291, children=keys)])
        result = build_screen(doc)
        assert result.components_count == 1
        assert result.screen.elements["keyboard"].properties["keyboardType"] == "alphabetic"
        assert [s.title for s in result.screen.sections] == ["Header"]

    def test_empty_screen(self):
        result = build_screen(screen([]))
        out = result.to_dict()["screen"]
        assert out["layout"] == {"sections": [], "orderedElements": []}
        assert out["elements"] == {}

    def test_screen_bounds_override(self):
        doc = screen([node("Icon/Close", "INSTANCE", x=1350, y=560, width=40, height=40)],
                     x=1000, y=500)
        result = build_screen(doc, {"x": 1000, "y": 500, "width": 390, "height": 844})
        comp = result.screen.ordered_elements[0]
        assert comp.position.to_dict() == {"x": 350, "y": 60}
        assert comp.alignment.horizontal == "right"

    def test_independent_runs(self):
        first = build_screen(login_screen())
        second = build_screen(login_screen())
        assert first.screen.to_dict() == second.screen.to_dict()


class TestResolveDocument:

    def test_files_response(self):
        payload = {"name": "Design File", "document": screen([])}
        root, name = resolve_document(payload)
        assert root["id"] == "0:1"
        assert name == "Design File"

    def test_nodes_response_with_url_style_id(self):
        payload = {"name": "File", "nodes": {"12:34": {"document": screen([])}}}
        root, _ = resolve_document(payload, "12-34")
        assert root["name"] == "Login"

    def test_nodes_response_missing_id(self):
        payload = {"nodes": {"12:34": {"document": screen([])}}}
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            resolve_document(payload, "9:9")
        assert exc_info.value.to_dict()["error"] == "unresolved_reference"

    def test_sub_node_of_bare_tree(self):
        inner = node("Card", "FRAME", node_id="3:3")
        root, _ = resolve_document(screen([inner]), "3:3")
        assert root["name"] == "Card"

    def test_sub_node_missing(self):
        with pytest.raises(UnresolvedReferenceError):
            build_screen(screen([]), node_id="7:7")

    @pytest.mark.parametrize("payload", [None, [], "text", {"meta": 1}, {"document": None}])
    def test_invalid_payloads(self, payload):
        with pytest.raises(InvalidDocumentError) as exc_info:
            build_screen(payload)
        assert exc_info.value.kind == "invalid_document"

    def test_source_id_defaults_to_file_name(self):
        payload = {"name": "Design File", "document": screen([])}
        assert build_screen(payload).source_id == "Design File"
