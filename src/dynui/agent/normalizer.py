"""Tree Normalizer for UI node forests.

Assigns a stable, unique id to every node reachable from a forest,
including container children and form fields. Existing ids are kept
verbatim so callers can pin identities across conversation turns.

The pass rebuilds the tree instead of editing it in place, so its input
is never modified and it is safe to share across concurrent requests.
"""

import uuid
from collections.abc import Callable, Sequence
from typing import Optional, assert_never

from dynui.agent.schema import (
    AgentResponse,
    ButtonNode,
    CodeNode,
    ContainerNode,
    FormNode,
    HeadingNode,
    InputNode,
    ListNode,
    Node,
    TableNode,
    TextNode,
)

IdFactory = Callable[[], str]


def new_id() -> str:
    """Mint a new opaque node identifier."""
    return str(uuid.uuid4())


def _assign(node: Node, make_id: IdFactory) -> Node:
    # Pre-order: a node gets its id before any of its members
    update: dict = {"id": node.id or make_id()}

    match node:
        case ContainerNode():
            update["children"] = [_assign(child, make_id) for child in node.children]
        case FormNode():
            fields = [_assign(field, make_id) for field in node.props.fields]
            update["props"] = node.props.model_copy(update={"fields": fields})
        case (
            TextNode()
            | HeadingNode()
            | ButtonNode()
            | InputNode()
            | ListNode()
            | TableNode()
            | CodeNode()
        ):
            pass
        case _:
            assert_never(node)

    return node.model_copy(update=update)


def assign_ids(
    nodes: Sequence[Node],
    id_factory: Optional[IdFactory] = None,
) -> list[Node]:
    """Return a copy of the forest where every node has an id.

    Args:
        nodes: The forest to normalize
        id_factory: Source of new ids (default: uuid4 strings)

    Returns:
        New list of nodes in the original order. Running this again on
        its own output returns an equal forest.
    """
    make_id = id_factory or new_id
    return [_assign(node, make_id) for node in nodes]


def ensure_ids(
    response: AgentResponse,
    id_factory: Optional[IdFactory] = None,
) -> AgentResponse:
    """Return a copy of the response with its ui forest normalized."""
    return response.model_copy(update={"ui": assign_ids(response.ui, id_factory)})


def iter_nodes(nodes: Sequence[Node]):
    """Yield every node of a forest in depth-first pre-order."""
    for node in nodes:
        yield node
        if isinstance(node, ContainerNode):
            yield from iter_nodes(node.children)
        elif isinstance(node, FormNode):
            yield from iter_nodes(node.props.fields)
