"""Testes da conversão de chaves do Flow JSON (autoria <-> wire)."""

from __future__ import annotations

import copy
import logging

import pytest

from app.flow_json import (
    FlowJsonCaseError,
    from_wire_case,
    from_wire_key_name,
    is_component_node,
    to_wire_case,
    to_wire_key_name,
)
from app.flow_json.case import camel_to_kebab, suggest_camel_case

AUTHORING_FLOW = {
    "version": "7.2",
    "dataApiVersion": "3.0",
    "routingModel": {"WELCOME": ["DETAILS"], "DETAILS": []},
    "screens": [
        {
            "id": "WELCOME",
            "title": "Bem-vindo",
            "refreshOnBack": True,
            "data": {"products": {"type": "array", "__example__": [{"id": "1"}]}},
            "layout": {
                "type": "SingleColumnLayout",
                "children": [
                    {
                        "type": "Dropdown",
                        "name": "product",
                        "label": "Produto",
                        "dataSource": "${data.products}",
                        "onSelectAction": {
                            "name": "data_exchange",
                            "payload": {"productId": "${form.product}"},
                        },
                        "inputMode": "list",
                    },
                    {
                        "type": "Footer",
                        "label": "Continuar",
                        "onClickAction": {"name": "navigate", "next": {"type": "screen", "name": "DETAILS"}},
                    },
                ],
            },
        }
    ],
}


class TestToWireCase:
    """Testes de autoria -> wire."""

    def test_top_level_keys_use_underscore_table(self) -> None:
        wire = to_wire_case({"version": "7.2", "dataApiVersion": "3.0"})
        assert wire == {"version": "7.2", "data_api_version": "3.0"}

    def test_component_properties_become_kebab(self) -> None:
        wire = to_wire_case(AUTHORING_FLOW)
        dropdown = wire["screens"][0]["layout"]["children"][0]
        assert dropdown["data-source"] == "${data.products}"
        assert "on-select-action" in dropdown
        # Fora da tabela: heurística camel -> kebab dentro de componente
        assert dropdown["input-mode"] == "list"

    def test_preserve_keys_are_untouched(self) -> None:
        wire = to_wire_case(AUTHORING_FLOW)
        screen = wire["screens"][0]
        assert screen["id"] == "WELCOME"
        assert screen["layout"]["type"] == "SingleColumnLayout"
        assert screen["refresh_on_back"] is True

    @pytest.mark.parametrize("key", ["flowToken", "flowAction", "flowActionPayload", "flowId"])
    def test_preserve_set_wins_over_kebab_table(self, key: str) -> None:
        """Chave presente em preserve_keys e kebab_keys não é convertida para wire."""
        node = {"type": "Footer", key: "x"}
        assert to_wire_case(node, strict=False) == node
        assert to_wire_key_name(key, component=True) == key

    def test_constant_keys_are_kept(self) -> None:
        wire = to_wire_case(AUTHORING_FLOW)
        assert wire["routing_model"] == {"WELCOME": ["DETAILS"], "DETAILS": []}

    def test_values_and_array_order_are_not_changed(self) -> None:
        wire = to_wire_case({"screens": [{"id": "B"}, {"id": "A"}], "title": "dataApiVersion"})
        assert [s["id"] for s in wire["screens"]] == ["B", "A"]
        assert wire["title"] == "dataApiVersion"

    def test_input_is_not_mutated(self) -> None:
        original = copy.deepcopy(AUTHORING_FLOW)
        to_wire_case(AUTHORING_FLOW)
        assert original == AUTHORING_FLOW

    def test_example_key_allowed_in_strict_mode(self) -> None:
        wire = to_wire_case({"data": {"items": {"__example__": []}}})
        assert wire == {"data": {"items": {"__example__": []}}}

    def test_unmapped_camel_keys_logged_once(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="app.flow_json.case"):
            to_wire_case({"customThing": 1, "nested": [{"customThing": 2, "otherKey": 3}]})
        records = [r for r in caplog.records if r.getMessage() == "flow_json_unmapped_keys"]
        assert len(records) == 1
        assert records[0].keys == ["customThing", "otherKey"]

    def test_no_warning_when_every_key_maps(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="app.flow_json.case"):
            to_wire_case({"version": "7.2", "dataApiVersion": "3.0"})
        assert not [r for r in caplog.records if r.getMessage() == "flow_json_unmapped_keys"]


class TestStrictMode:
    """Testes do modo estrito."""

    def test_snake_case_key_rejected_with_suggestion(self) -> None:
        with pytest.raises(FlowJsonCaseError, match="dataApiVersion") as exc_info:
            to_wire_case({"data_api_version": "3.0"}, strict=True)
        assert exc_info.value.key == "data_api_version"
        assert exc_info.value.suggestion == "dataApiVersion"

    def test_kebab_case_key_rejected_with_path(self) -> None:
        payload = {"screens": [{"layout": {"children": [{"type": "TextInput", "helper-text": "x"}]}}]}
        with pytest.raises(FlowJsonCaseError) as exc_info:
            to_wire_case(payload)
        assert exc_info.value.suggestion == "helperText"
        assert exc_info.value.path == "$.screens[0].layout.children[0]"

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            to_wire_case({"routing_model": {}})

    def test_non_strict_accepts_wire_keys(self) -> None:
        assert to_wire_case({"data_api_version": "3.0"}, strict=False) == {"data_api_version": "3.0"}

    def test_dunder_keys_allowed(self) -> None:
        assert to_wire_case({"__comment__": "x"}) == {"__comment__": "x"}


class TestFromWireCase:
    """Testes de wire -> autoria."""

    def test_reverse_tables(self) -> None:
        assert from_wire_case({"data_api_version": "3.0", "data-source": []}) == {
            "dataApiVersion": "3.0",
            "dataSource": [],
        }

    def test_generic_kebab_and_snake(self) -> None:
        assert from_wire_case({"input-mode": 1, "some_field": 2}) == {"inputMode": 1, "someField": 2}

    def test_dunder_keys_untouched(self) -> None:
        assert from_wire_case({"__example__": {"a_b": 1}}) == {"__example__": {"aB": 1}}

    def test_flow_token_becomes_camel(self) -> None:
        assert from_wire_case({"flow_token": "tok"}) == {"flowToken": "tok"}

    def test_reverse_entries_of_preserved_keys_apply(self) -> None:
        wire = {"flow_action": "navigate", "flow_action_payload": {}, "flow_id": "1"}
        assert from_wire_case(wire) == {"flowAction": "navigate", "flowActionPayload": {}, "flowId": "1"}

    def test_nested_lists(self) -> None:
        assert from_wire_case([{"error_message": "x"}, "plain"]) == [{"errorMessage": "x"}, "plain"]


class TestRoundTrip:
    """from_wire_case(to_wire_case(x, strict=False)) == x."""

    def test_end_to_end_minimal_payload(self) -> None:
        authoring = {"version": "7.2", "dataApiVersion": "3.0"}
        wire = to_wire_case(authoring, strict=False)
        assert wire == {"version": "7.2", "data_api_version": "3.0"}
        assert from_wire_case(wire) == authoring

    def test_full_flow_round_trip(self) -> None:
        assert from_wire_case(to_wire_case(AUTHORING_FLOW, strict=False)) == AUTHORING_FLOW

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            [],
            "scalar",
            {"type": "TextInput", "maxChars": 80, "helperText": "h", "errorMessage": "e"},
            {"type": "DatePicker", "minDate": "2024-01-01", "unavailableDates": ["2024-01-02"]},
            {"previewParameters": {"flowAction": "navigate"}},
        ],
    )
    def test_round_trip_cases(self, payload: object) -> None:
        assert from_wire_case(to_wire_case(payload, strict=False)) == payload


class TestHelpers:
    """Testes das funções auxiliares."""

    @pytest.mark.parametrize(
        ("node", "expected"),
        [
            ({"type": "Dropdown"}, True),
            ({"type": "screen"}, False),
            ({"type": 1}, False),
            ({}, False),
        ],
    )
    def test_is_component_node(self, node: dict, expected: bool) -> None:
        assert is_component_node(node) is expected

    def test_camel_to_kebab(self) -> None:
        assert camel_to_kebab("onSelectAction") == "on-select-action"
        assert camel_to_kebab("maxURLSize") == "max-url-size"

    def test_suggest_camel_case(self) -> None:
        assert suggest_camel_case("data_api_version") == "dataApiVersion"
        assert suggest_camel_case("on-click-action") == "onClickAction"

    def test_single_key_helpers(self) -> None:
        assert to_wire_key_name("dataApiVersion") == "data_api_version"
        assert to_wire_key_name("inputMode") == "inputMode"
        assert to_wire_key_name("inputMode", component=True) == "input-mode"
        assert from_wire_key_name("on-click-action") == "onClickAction"
