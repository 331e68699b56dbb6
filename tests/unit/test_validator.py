"""Unit tests for validator module."""

import json

import pytest
from docgen.core.errors import MalformedResponse
from docgen.models.wireframe import ElementType
from docgen.validator import (
    ResponseFormat,
    TreeValidator,
    ValidationSeverity,
    clean_response,
    parse_wireframe_tree,
    strip_code_fence,
)


class TestStripCodeFence:
    """Tests for fence removal."""

    @pytest.mark.parametrize("tag", ["", "json", "html", "markdown"])
    def test_wrapped_equals_unwrapped(self, tag):
        content = '{"screens": []}'
        assert strip_code_fence(f"```{tag}\n{content}\n```") == strip_code_fence(content)

    def test_surrounding_whitespace(self):
        assert strip_code_fence("  \n```json\n{}\n```\n  ") == "{}"

    def test_inner_fences_kept(self):
        text = "# Flows\n\n```mermaid\nflowchart TD\n```\n\nFin"
        assert strip_code_fence(text) == text

    def test_document_made_of_two_blocks_kept(self):
        text = "```mermaid\nA\n```\n\n```mermaid\nB\n```"
        assert strip_code_fence(text) == text

    def test_truncated_fence(self):
        assert strip_code_fence('```json\n{"screens": [') == '{"screens": ['

    def test_none(self):
        assert strip_code_fence(None) == ""


class TestCleanResponse:
    """Tests for clean_response."""

    def test_markdown_returned_verbatim(self):
        assert clean_response("# Titre\n\nTexte", ResponseFormat.MARKDOWN) == "# Titre\n\nTexte"

    def test_html_unwrapped(self):
        assert clean_response("```html\n<div>x</div>\n```", "html") == "<div>x</div>"

    def test_fenced_tree_equals_plain(self):
        payload = {"screens": [{"id": "s1", "name": "Login", "elements": []}]}
        plain = json.dumps(payload)
        fenced = f"```json\n{plain}\n```"
        assert clean_response(fenced, ResponseFormat.TREE) == clean_response(plain, ResponseFormat.TREE)

    def test_empty_screens_accepted(self):
        assert clean_response('{"screens": []}', ResponseFormat.TREE) == {"screens": []}

    def test_missing_screens_rejected(self):
        with pytest.raises(MalformedResponse) as exc_info:
            clean_response('{"pages": []}', ResponseFormat.TREE)
        assert exc_info.value.raw_response == '{"pages": []}'

    def test_screens_not_array_rejected(self):
        with pytest.raises(MalformedResponse):
            clean_response('{"screens": {}}', ResponseFormat.TREE)

    def test_invalid_json_rejected(self):
        with pytest.raises(MalformedResponse) as exc_info:
            clean_response("Voici le JSON: {", ResponseFormat.TREE)
        assert exc_info.value.kind == "malformed_response"
        assert "raw_response" not in exc_info.value.to_dict()

    def test_top_level_array_rejected(self):
        with pytest.raises(MalformedResponse):
            clean_response("[]", ResponseFormat.ESTIMATE)

    def test_estimate_shape(self):
        payload = clean_response('{"sections": [], "roles": []}', ResponseFormat.ESTIMATE)
        assert payload == {"sections": [], "roles": []}

    def test_estimate_roles_must_be_array(self):
        with pytest.raises(MalformedResponse):
            clean_response('{"sections": [], "roles": "admin"}', ResponseFormat.ESTIMATE)

    def test_format_is_json(self):
        assert ResponseFormat.TREE.is_json
        assert ResponseFormat.ESTIMATE.is_json
        assert not ResponseFormat.HTML.is_json


class TestTreeValidator:
    """Tests for TreeValidator."""

    @pytest.fixture
    def validator(self):
        return TreeValidator()

    @pytest.fixture
    def valid_payload(self):
        return {
            "screens": [
                {
                    "id": "screen_login",
                    "name": "Connexion",
                    "description": "Écran de connexion",
                    "route": "/login",
                    "elements": [
                        {
                            "id": "el_1",
                            "type": "header",
                            "label": "MonApp",
                            "children": [
                                {"id": "el_2", "type": "icon", "label": "menu"},
                            ],
                        },
                        {
                            "id": "el_3",
                            "type": "form",
                            "children": [
                                {"id": "el_4", "type": "input", "label": "Email", "placeholder": "vous@exemple.fr"},
                                {"id": "el_5", "type": "button", "label": "Se connecter",
                                 "props": {"variant": "primary", "width": "full"}},
                            ],
                        },
                        {
                            "id": "el_6",
                            "type": "list",
                            "items": [{"title": "Réservation", "subtitle": "Demain", "image": True}],
                        },
                    ],
                }
            ]
        }

    def test_valid_payload(self, validator, valid_payload):
        result = validator.validate(valid_payload)
        assert result.valid is True
        assert result.warnings == []
        screen = result.screens[0]
        assert screen.route == "/login"
        assert [e.id for e in screen.iter_elements()] == ["el_1", "el_2", "el_3", "el_4", "el_5", "el_6"]
        assert screen.elements[1].children[0].placeholder == "vous@exemple.fr"
        assert screen.elements[2].items[0].image is True

    def test_roundtrip_to_dict(self, validator, valid_payload):
        result = validator.validate(valid_payload)
        assert result.screens[0].to_dict()["elements"][1]["children"][1]["props"] == {
            "variant": "primary",
            "width": "full",
        }

    def test_empty_screens_valid(self, validator):
        result = validator.validate({"screens": []})
        assert result.valid is True
        assert result.screens == []

    def test_missing_screens(self, validator):
        result = validator.validate({})
        assert result.valid is False
        assert result.errors[0].code == "MISSING_SCREENS"

    def test_unknown_element_type(self, validator):
        result = validator.validate({"screens": [{"id": "s", "name": "S", "elements": [{"id": "a", "type": "carousel"}]}]})
        assert result.valid is False
        assert result.errors[0].code == "UNKNOWN_ELEMENT_TYPE"
        assert result.errors[0].path == "$.screens[0].elements[0].type"

    def test_missing_element_type(self, validator):
        result = validator.validate({"screens": [{"id": "s", "name": "S", "elements": [{"id": "a"}]}]})
        assert result.errors[0].code == "MISSING_ELEMENT_TYPE"

    def test_duplicate_ids_within_screen(self, validator):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "text"},
            {"id": "b", "type": "card", "children": [{"id": "a", "type": "text"}]},
        ]}]}
        result = validator.validate(payload)
        assert [e.code for e in result.errors] == ["DUPLICATE_ELEMENT_ID"]

    def test_same_ids_across_screens_allowed(self, validator):
        payload = {"screens": [
            {"id": "s1", "name": "A", "elements": [{"id": "el_1", "type": "text"}]},
            {"id": "s2", "name": "B", "elements": [{"id": "el_1", "type": "text"}]},
        ]}
        assert validator.validate(payload).valid is True

    def test_generated_ids(self, validator):
        payload = {"screens": [{"elements": [
            {"type": "text"},
            {"id": "el_auto_2", "type": "text"},
            {"type": "text"},
        ]}]}
        result = validator.validate(payload)
        assert result.valid is True
        screen = result.screens[0]
        assert screen.id == "screen_1"
        assert screen.name == "Écran 1"
        assert [e.id for e in screen.elements] == ["el_auto_1", "el_auto_2", "el_auto_3"]
        codes = [w.code for w in result.warnings]
        assert codes.count("GENERATED_ELEMENT_ID") == 2
        assert "GENERATED_SCREEN_ID" in codes
        assert "GENERATED_SCREEN_NAME" in codes

    def test_fields_dropped_for_type(self, validator):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "button", "placeholder": "x", "children": [], "items": ["y"]},
        ]}]}
        result = validator.validate(payload)
        assert result.valid is True
        element = result.screens[0].elements[0]
        assert element.placeholder is None
        assert element.children == []
        assert element.items == []
        assert [w.code for w in result.warnings] == ["DROPPED_FIELD"] * 3

    def test_string_items_promoted(self, validator):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "tabs", "items": ["Profil", {"label": "Sécurité"}]},
        ]}]}
        items = validator.validate(payload).screens[0].elements[0].items
        assert items[0].title == "Profil"
        assert items[1].title == "Sécurité"

    def test_invalid_item(self, validator):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "list", "items": [42]},
        ]}]}
        assert validator.validate(payload).errors[0].code == "INVALID_ITEM"

    def test_children_must_be_array(self, validator):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "card", "children": "oops"},
        ]}]}
        assert validator.validate(payload).errors[0].code == "INVALID_CHILDREN"

    def test_unknown_prop_value_dropped(self, validator):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "button", "props": {"color": "fuchsia", "size": "lg", "icon": "home"}},
        ]}]}
        result = validator.validate(payload)
        assert result.screens[0].elements[0].props == {"size": "lg", "icon": "home"}
        assert result.warnings[0].code == "UNKNOWN_PROP_VALUE"
        assert result.warnings[0].severity == ValidationSeverity.WARNING

    @pytest.mark.parametrize("value", [["sm", "md"], {"x": "md"}, 2])
    def test_non_string_prop_value_dropped(self, validator, value):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [
            {"id": "a", "type": "button", "props": {"size": value, "variant": "primary"}},
        ]}]}
        result = validator.validate(payload)
        assert result.valid
        assert result.screens[0].elements[0].props == {"variant": "primary"}
        assert [w.code for w in result.warnings] == ["UNKNOWN_PROP_VALUE"]

    def test_to_dict(self, validator):
        data = validator.validate({"screens": [{"elements": []}]}).to_dict()
        assert data["valid"] is True
        assert data["screen_count"] == 1
        assert data["warning_count"] == 2


class TestParseWireframeTree:
    """Tests for parse_wireframe_tree."""

    def test_raises_on_errors(self):
        payload = {"screens": [{"id": "s", "name": "S", "elements": [{"id": "a", "type": "video"}]}]}
        with pytest.raises(MalformedResponse) as exc_info:
            parse_wireframe_tree(payload, raw_response="raw")
        assert "video" in exc_info.value.detail
        assert exc_info.value.raw_response == "raw"

    def test_summarizes_many_errors(self):
        elements = [{"id": str(i), "type": "video"} for i in range(5)]
        with pytest.raises(MalformedResponse) as exc_info:
            parse_wireframe_tree({"screens": [{"id": "s", "name": "S", "elements": elements}]})
        assert "(+2 more)" in exc_info.value.detail

    def test_returns_screens(self):
        result = parse_wireframe_tree({"screens": [{"id": "s", "name": "S", "elements": [{"type": "divider"}]}]})
        assert result.screens[0].elements[0].type is ElementType.DIVIDER
