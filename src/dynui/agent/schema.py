"""Structured output schema for the dynamic UI agent.

This module defines AgentResponse - the envelope the LLM returns for
each request - and the recursive tree of UI nodes it carries, plus the
validation helpers the agent uses on raw backend output.

Every node kind has its own props model. Omitted optional props take
their declared defaults here, so there is exactly one place where the
meaning of an omitted field is decided.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from dynui.core.errors import SchemaError


class WireModel(BaseModel):
    """Immutable model using the camelCase wire format.

    Python code may use either the snake_case attribute name or the
    camelCase wire name when constructing instances.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _kind_field(kind: str) -> Any:
    # "type" is accepted because OpenAI-style generators favor it
    return Field(default=kind, validation_alias=AliasChoices("kind", "type"))


def _require_kind(schema: dict[str, Any]) -> None:
    # The default only serves Python construction; generated output must tag every node
    schema["properties"]["kind"].pop("default", None)
    required = schema.setdefault("required", [])
    if "kind" not in required:
        required.insert(0, "kind")


class NodeModel(WireModel):
    """Base for UI nodes; kind is required in the generated JSON Schema."""

    model_config = ConfigDict(json_schema_extra=_require_kind)


# =============================================================================
# Conversation Models
# =============================================================================


MessageRole = Literal["system", "user", "assistant", "tool"]


class ChatMessage(WireModel):
    """One message of conversation history."""

    role: MessageRole = Field(description="Who sent the message")
    content: str = Field(min_length=1, description="Message text")


class UIAction(WireModel):
    """An action the rendered UI can trigger."""

    id: str = Field(min_length=1, description="Action identifier referenced by actionId props")
    type: Literal["submit", "navigate", "open_url", "emit_event", "call"]
    label: Optional[str] = None
    params: Optional[dict[str, Any]] = None


# =============================================================================
# Node Props
# =============================================================================


class TextProps(WireModel):
    text: str
    variant: Literal["body", "muted", "caption"] = "body"


class HeadingProps(WireModel):
    text: str
    level: int = Field(default=2, ge=1, le=4)


class ButtonProps(WireModel):
    label: str
    variant: Literal["primary", "secondary", "danger"] = "primary"
    action_id: Optional[str] = None


class InputProps(WireModel):
    name: str = Field(min_length=1, description="Form data key for this input")
    label: Optional[str] = None
    placeholder: Optional[str] = None
    value: Optional[Union[str, int, float]] = None
    required: Optional[bool] = None
    input_type: Literal["text", "email", "password", "number", "date"] = "text"


class ListProps(WireModel):
    items: list[str]


class TableColumn(WireModel):
    key: str = Field(min_length=1, description="Row mapping key for this column")
    header: str


class TableProps(WireModel):
    columns: list[TableColumn]
    rows: list[dict[str, Any]]


class CodeProps(WireModel):
    language: str = "txt"
    code: str


class ContainerProps(WireModel):
    direction: Literal["row", "column"] = "column"
    gap: float = Field(default=12, ge=0, le=48)
    align: Literal["start", "center", "end", "stretch"] = "start"
    justify: Literal["start", "center", "end", "between"] = "start"


# =============================================================================
# Nodes
# =============================================================================


class TextNode(NodeModel):
    kind: Literal["text"] = _kind_field("text")
    id: Optional[str] = None
    props: TextProps


class HeadingNode(NodeModel):
    kind: Literal["heading"] = _kind_field("heading")
    id: Optional[str] = None
    props: HeadingProps


class ButtonNode(NodeModel):
    kind: Literal["button"] = _kind_field("button")
    id: Optional[str] = None
    props: ButtonProps


class InputNode(NodeModel):
    kind: Literal["input"] = _kind_field("input")
    id: Optional[str] = None
    props: InputProps


class FormProps(WireModel):
    title: Optional[str] = None
    fields: list[InputNode] = Field(default_factory=list)
    submit_label: str = "Submit"
    action_id: Optional[str] = None


class FormNode(NodeModel):
    kind: Literal["form"] = _kind_field("form")
    id: Optional[str] = None
    props: FormProps = Field(default_factory=FormProps)


class ListNode(NodeModel):
    kind: Literal["list"] = _kind_field("list")
    id: Optional[str] = None
    props: ListProps


class TableNode(NodeModel):
    kind: Literal["table"] = _kind_field("table")
    id: Optional[str] = None
    props: TableProps


class CodeNode(NodeModel):
    kind: Literal["code"] = _kind_field("code")
    id: Optional[str] = None
    props: CodeProps


class ContainerNode(NodeModel):
    """Layout node owning an ordered sequence of child nodes."""

    kind: Literal["container"] = _kind_field("container")
    id: Optional[str] = None
    props: ContainerProps = Field(default_factory=ContainerProps)
    children: list["Node"] = Field(default_factory=list)


def _node_kind(value: Any) -> Optional[str]:
    """Read the discriminant from raw input or an already-built node."""
    if isinstance(value, dict):
        kind = value.get("kind", value.get("type"))
    else:
        kind = getattr(value, "kind", None)
    return kind if isinstance(kind, str) else None


Node = Annotated[
    Union[
        Annotated[TextNode, Tag("text")],
        Annotated[HeadingNode, Tag("heading")],
        Annotated[ButtonNode, Tag("button")],
        Annotated[InputNode, Tag("input")],
        Annotated[FormNode, Tag("form")],
        Annotated[ListNode, Tag("list")],
        Annotated[TableNode, Tag("table")],
        Annotated[CodeNode, Tag("code")],
        Annotated[ContainerNode, Tag("container")],
    ],
    Discriminator(_node_kind),
]

NODE_KINDS: tuple[str, ...] = (
    "text",
    "heading",
    "button",
    "input",
    "form",
    "list",
    "table",
    "code",
    "container",
)

# Resolve forward references for recursive type
ContainerNode.model_rebuild()


# =============================================================================
# Response Envelope
# =============================================================================


class AgentResponse(WireModel):
    """Structured output from the agent for one request.

    The ui field is a forest: an ordered sequence of independent trees.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    messages: list[ChatMessage] = Field(default_factory=list)
    ui: list[Node] = Field(default_factory=list)
    actions: list[UIAction] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    follow_up_question: Optional[str] = None


# =============================================================================
# Validation
# =============================================================================


_NODE_ADAPTER: TypeAdapter = TypeAdapter(Node)


def _schema_name(schema: Any) -> str:
    return getattr(schema, "__name__", repr(schema))


def _is_model(schema: Any) -> bool:
    try:
        return isinstance(schema, type) and issubclass(schema, BaseModel)
    except TypeError:
        # Generic aliases such as list[int]
        return False


def validate_with(schema: Any, raw: Any) -> Any:
    """Validate raw output against any schema.

    Args:
        schema: A pydantic model class, or any type accepted by TypeAdapter
        raw: The raw object (usually a dict parsed from JSON)

    Returns:
        The validated object, with defaults applied

    Raises:
        SchemaError: If raw doesn't match the schema
    """
    try:
        if _is_model(schema):
            return schema.model_validate(raw)
        return TypeAdapter(schema).validate_python(raw)
    except ValidationError as e:
        raise SchemaError(
            f"Output does not match {_schema_name(schema)}: {e}",
            errors=e.errors(include_url=False),
        ) from e


def validate_node(raw: Any) -> Node:
    """Validate a single raw node (and its descendants)."""
    try:
        return _NODE_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise SchemaError(
            f"Invalid UI node: {e}", errors=e.errors(include_url=False)
        ) from e


def validate_response(raw: Any) -> AgentResponse:
    """Validate a raw envelope against the built-in AgentResponse schema."""
    return validate_with(AgentResponse, raw)


_NODE_MODEL_NAMES = {
    model.__name__
    for model in (
        TextNode,
        HeadingNode,
        ButtonNode,
        InputNode,
        FormNode,
        ListNode,
        TableNode,
        CodeNode,
        ContainerNode,
    )
}


def _tag_node_unions(value: Any, defs: dict[str, Any]) -> None:
    """Attach an explicit kind discriminator to every node union in a JSON Schema."""
    if isinstance(value, list):
        for item in value:
            _tag_node_unions(item, defs)
        return
    if not isinstance(value, dict):
        return

    choices = value.get("oneOf")
    if choices and all(isinstance(c, dict) and "$ref" in c for c in choices):
        mapping = {}
        for choice in choices:
            name = choice["$ref"].rsplit("/", 1)[-1]
            kind = defs.get(name, {}).get("properties", {}).get("kind", {}).get("const")
            if name in _NODE_MODEL_NAMES and kind:
                mapping[kind] = choice["$ref"]
        if len(mapping) == len(choices):
            value["discriminator"] = {"propertyName": "kind", "mapping": mapping}

    for item in value.values():
        _tag_node_unions(item, defs)


def schema_descriptor(schema: Any) -> dict[str, Any]:
    """Get the JSON Schema used to constrain the generation backend.

    Node definitions require kind, and node unions carry an OpenAPI-style
    discriminator mapping each kind to its definition.
    """
    if _is_model(schema):
        descriptor = schema.model_json_schema()
    else:
        descriptor = TypeAdapter(schema).json_schema()
    _tag_node_unions(descriptor, descriptor.get("$defs", {}))
    return descriptor


def dump_response(response: AgentResponse) -> dict[str, Any]:
    """Serialize a response to its JSON wire format."""
    return response.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Instructions for LLM
# =============================================================================


BUILT_IN_SYSTEM_PROMPT = """You are Dynamic UI Agent. Return ONLY structured JSON that follows the provided JSON schema. Generate concise UI elements to fulfill the user's intent.

You build a forest of UI nodes in the "ui" array. Every node has a "kind" and a "props" object:

- text: { text: string, variant: "body"|"muted"|"caption" }
- heading: { text: string, level: 1-4 }
- button: { label: string, variant: "primary"|"secondary"|"danger", actionId?: string }
- input: { name: string, label?: string, placeholder?: string, value?: string|number, required?: boolean, inputType: "text"|"email"|"password"|"number"|"date" }
- form: { title?: string, fields: input[], submitLabel: string, actionId?: string }
- list: { items: string[] }
- table: { columns: [{key, header}], rows: [{...}] }
- code: { language: string, code: string }
- container: { direction: "row"|"column", gap: 0-48, align: "start"|"center"|"end"|"stretch", justify: "start"|"center"|"end"|"between" } with a "children" array of nodes

Prefer semantic components (container, heading, text, form, input, button, table, list, code). Suggest next steps (suggestions) and a follow-up question when useful. Do not include markdown or prose outside JSON.

IMPORTANT: For form elements, each field in the 'fields' array MUST be a complete input node with 'kind: "input"' and a 'props' object containing name, label, placeholder, inputType, and required fields. Example:
{
  "kind": "form",
  "props": {
    "fields": [
      {
        "kind": "input",
        "props": {
          "name": "email",
          "label": "Email",
          "inputType": "email"
        }
      }
    ]
  }
}"""
