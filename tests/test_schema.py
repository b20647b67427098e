"""Tests for the structured output schema."""

import pytest
from pydantic import BaseModel

from dynui.agent.schema import (
    BUILT_IN_SYSTEM_PROMPT,
    NODE_KINDS,
    AgentResponse,
    ButtonNode,
    ChatMessage,
    ContainerNode,
    FormNode,
    HeadingNode,
    InputNode,
    TableNode,
    TextNode,
    dump_response,
    schema_descriptor,
    validate_node,
    validate_response,
    validate_with,
)
from dynui.core.errors import SchemaError


class TestDefaults:
    """Test defaults applied during validation."""

    def test_heading_level_default(self):
        """Test heading level defaults to 2."""
        node = validate_node({"kind": "heading", "props": {"text": "Hi"}})
        assert isinstance(node, HeadingNode)
        assert node.props.level == 2

    def test_container_defaults(self):
        """Test container layout defaults."""
        node = validate_node({"kind": "container", "props": {}})
        assert isinstance(node, ContainerNode)
        assert node.props.direction == "column"
        assert node.props.gap == 12
        assert node.props.align == "start"
        assert node.props.justify == "start"
        assert node.children == []

    def test_text_and_button_variants(self):
        """Test enum defaults for text and button."""
        text = validate_node({"kind": "text", "props": {"text": "Hello"}})
        button = validate_node({"kind": "button", "props": {"label": "Go"}})
        assert text.props.variant == "body"
        assert button.props.variant == "primary"
        assert button.props.action_id is None

    def test_input_and_code_defaults(self):
        """Test input type and code language defaults."""
        field = validate_node({"kind": "input", "props": {"name": "email"}})
        code = validate_node({"kind": "code", "props": {"code": "print(1)"}})
        assert field.props.input_type == "text"
        assert code.props.language == "txt"

    def test_form_defaults(self):
        """Test form defaults to no fields and a Submit label."""
        node = validate_node({"kind": "form", "props": {}})
        assert isinstance(node, FormNode)
        assert node.props.fields == []
        assert node.props.submit_label == "Submit"

    def test_envelope_defaults(self):
        """Test envelope collections default to empty."""
        response = validate_response({})
        assert response.messages == []
        assert response.ui == []
        assert response.actions == []
        assert response.suggestions == []
        assert response.title is None
        assert response.follow_up_question is None


class TestRejection:
    """Test rejection of invalid nodes."""

    def test_input_missing_name(self):
        """Test input without required name is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"kind": "input", "props": {}})

    def test_input_empty_name(self):
        """Test input with empty name is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"kind": "input", "props": {"name": ""}})

    def test_heading_level_out_of_range(self):
        """Test heading level outside 1-4 is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"kind": "heading", "props": {"text": "x", "level": 9}})
        with pytest.raises(SchemaError):
            validate_node({"kind": "heading", "props": {"text": "x", "level": 0}})

    def test_gap_out_of_range(self):
        """Test container gap outside 0-48 is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"kind": "container", "props": {"gap": 64}})

    def test_unknown_kind(self):
        """Test unknown discriminant is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"kind": "carousel", "props": {}})

    def test_missing_kind(self):
        """Test node without a discriminant is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"props": {"text": "Hello"}})

    def test_invalid_enum_value(self):
        """Test value outside an enum domain is rejected."""
        with pytest.raises(SchemaError):
            validate_node({"kind": "button", "props": {"label": "x", "variant": "ghost"}})

    def test_form_field_must_be_input(self):
        """Test form fields reject non-input nodes."""
        raw = {
            "kind": "form",
            "props": {"fields": [{"kind": "text", "props": {"text": "Not a field"}}]},
        }
        with pytest.raises(SchemaError):
            validate_node(raw)

    def test_invalid_nested_child(self):
        """Test invalid nodes deep in a container are rejected."""
        raw = {
            "kind": "container",
            "children": [
                {"kind": "container", "children": [{"kind": "heading", "props": {}}]}
            ],
        }
        with pytest.raises(SchemaError):
            validate_node(raw)

    def test_empty_chat_message(self):
        """Test chat messages require content."""
        with pytest.raises(SchemaError):
            validate_response({"messages": [{"role": "user", "content": ""}]})

    def test_invalid_action_type(self):
        """Test action type must be in the declared domain."""
        with pytest.raises(SchemaError):
            validate_response({"actions": [{"id": "a", "type": "explode"}]})

    def test_schema_error_carries_details(self):
        """Test SchemaError exposes validation error details."""
        with pytest.raises(SchemaError) as exc_info:
            validate_node({"kind": "input", "props": {}})
        assert exc_info.value.errors
        assert isinstance(exc_info.value, ValueError)


class TestParsing:
    """Test parsing valid input."""

    def test_type_accepted_as_discriminator(self):
        """Test the 'type' wire name selects the node kind."""
        node = validate_node({"type": "text", "props": {"text": "Hello"}})
        assert isinstance(node, TextNode)
        assert node.kind == "text"

    def test_camel_case_props(self):
        """Test camelCase wire names map to attributes."""
        node = validate_node(
            {"kind": "form", "props": {"submitLabel": "Send", "actionId": "send"}}
        )
        assert node.props.submit_label == "Send"
        assert node.props.action_id == "send"

    def test_nested_containers(self):
        """Test containers nest to arbitrary depth."""
        raw = {"kind": "text", "props": {"text": "leaf"}}
        for _ in range(5):
            raw = {"kind": "container", "children": [raw]}
        node = validate_node(raw)
        depth = 0
        while isinstance(node, ContainerNode):
            node = node.children[0]
            depth += 1
        assert depth == 5
        assert node.props.text == "leaf"

    def test_table_rows(self):
        """Test table columns and rows are preserved in order."""
        node = validate_node({
            "kind": "table",
            "props": {
                "columns": [{"key": "a", "header": "A"}, {"key": "b", "header": "B"}],
                "rows": [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}],
            },
        })
        assert isinstance(node, TableNode)
        assert [c.key for c in node.props.columns] == ["a", "b"]
        assert node.props.rows[1] == {"a": 2, "b": "y"}

    def test_existing_id_kept(self):
        """Test ids on input are preserved."""
        node = validate_node({"kind": "button", "id": "cta", "props": {"label": "Go"}})
        assert isinstance(node, ButtonNode)
        assert node.id == "cta"

    def test_full_response(self, login_form_response):
        """Test validating a complete envelope."""
        response = validate_response(login_form_response)
        assert response.title == "Sign in"
        container = response.ui[0]
        assert isinstance(container, ContainerNode)
        assert [child.kind for child in container.children] == ["heading", "form", "button"]
        form = container.children[1]
        assert all(isinstance(f, InputNode) for f in form.props.fields)
        assert response.actions[0].type == "submit"

    def test_models_are_immutable(self):
        """Test nodes cannot be mutated after validation."""
        node = validate_node({"kind": "text", "props": {"text": "Hello"}})
        with pytest.raises(Exception):
            node.id = "changed"

    def test_chat_message_roles(self):
        """Test all message roles are accepted."""
        for role in ("system", "user", "assistant", "tool"):
            assert ChatMessage(role=role, content="hi").role == role


class TestCustomSchema:
    """Test validation against caller-supplied schemas."""

    def test_model_schema(self):
        """Test a pydantic model schema returns the model instance."""

        class Weather(BaseModel):
            city: str
            temperature: float

        result = validate_with(Weather, {"city": "Oslo", "temperature": 3.5})
        assert isinstance(result, Weather)
        assert result.city == "Oslo"

    def test_type_adapter_schema(self):
        """Test non-model types are validated with a TypeAdapter."""
        assert validate_with(list[int], [1, "2"]) == [1, 2]

    def test_custom_schema_error(self):
        """Test invalid custom output raises SchemaError."""

        class Weather(BaseModel):
            city: str

        with pytest.raises(SchemaError, match="Weather"):
            validate_with(Weather, {"temperature": 3})


class TestSerialization:
    """Test wire format and schema descriptor."""

    def test_dump_uses_wire_names(self, login_form_response):
        """Test dumping uses camelCase and omits unset optionals."""
        data = dump_response(validate_response(login_form_response))
        form = data["ui"][0]["children"][1]
        assert form["kind"] == "form"
        assert form["props"]["submitLabel"] == "Sign in"
        assert form["props"]["fields"][0]["props"]["inputType"] == "email"
        assert "followUpQuestion" not in data
        assert "id" not in form

    def test_dump_validates_back(self, login_form_response):
        """Test dumped output is valid input."""
        response = validate_response(login_form_response)
        assert validate_response(dump_response(response)) == response

    def test_descriptor_describes_node_kinds(self):
        """Test the JSON Schema covers every node kind."""
        descriptor = schema_descriptor(AgentResponse)
        assert descriptor["type"] == "object"
        assert "ui" in descriptor["properties"]
        definitions = descriptor["$defs"]
        for name in ("TextNode", "HeadingNode", "FormNode", "ContainerNode", "TableNode"):
            assert name in definitions
        assert definitions["HeadingProps"]["properties"]["level"]["maximum"] == 4
        assert "kind" in definitions["TextNode"]["properties"]

    @pytest.mark.parametrize("kind", NODE_KINDS)
    def test_descriptor_requires_kind(self, kind):
        """Test every node definition requires its discriminant."""
        definition = schema_descriptor(AgentResponse)["$defs"][f"{kind.capitalize()}Node"]
        assert "kind" in definition["required"]
        assert definition["properties"]["kind"]["const"] == kind
        assert "default" not in definition["properties"]["kind"]

    def test_descriptor_maps_kinds_in_forest(self):
        """Test the ui array declares kind as its discriminator."""
        items = schema_descriptor(AgentResponse)["properties"]["ui"]["items"]
        discriminator = items["discriminator"]
        assert discriminator["propertyName"] == "kind"
        assert set(discriminator["mapping"]) == set(NODE_KINDS)
        assert discriminator["mapping"]["form"] == "#/$defs/FormNode"

    def test_descriptor_maps_kinds_in_children(self):
        """Test container children use the same discriminator as the forest."""
        descriptor = schema_descriptor(AgentResponse)
        children = descriptor["$defs"]["ContainerNode"]["properties"]["children"]["items"]
        assert children["discriminator"] == descriptor["properties"]["ui"]["items"]["discriminator"]

    def test_untagged_node_rejected(self):
        """Test a node without kind is rejected, as the descriptor requires."""
        with pytest.raises(SchemaError):
            validate_node({"props": {"text": "hi"}})

    def test_python_construction_keeps_kind_default(self):
        """Test nodes built in Python still get their kind without passing it."""
        assert TextNode(props={"text": "hi"}).kind == "text"

    def test_descriptor_for_custom_type(self):
        """Test descriptors for non-model schemas."""
        assert schema_descriptor(list[str]) == {"items": {"type": "string"}, "type": "array"}


class TestSystemPrompt:
    """Test the built-in system prompt content."""

    def test_mentions_every_node_kind(self):
        """Test system prompt documents all node kinds."""
        for kind in NODE_KINDS:
            assert f"- {kind}:" in BUILT_IN_SYSTEM_PROMPT

    def test_requires_json_only(self):
        """Test system prompt forbids prose."""
        assert "ONLY structured JSON" in BUILT_IN_SYSTEM_PROMPT
        assert "'fields' array MUST be a complete input node" in BUILT_IN_SYSTEM_PROMPT
