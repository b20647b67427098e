"""Fallback Synthesizer for when generation is unavailable.

Builds a deterministic, schema-valid response that approximates the
user's request from keywords in the prompt. Rules are checked in order
and the first match wins; prompts matching no rule get a container that
echoes the request back.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from dynui.agent.schema import (
    AgentResponse,
    ContainerNode,
    ContainerProps,
    HeadingNode,
    HeadingProps,
    TableColumn,
    TableNode,
    TableProps,
    TextNode,
    TextProps,
)


@dataclass(frozen=True)
class FallbackRule:
    """A keyword rule mapping matching prompts to a response builder."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[str], AgentResponse]

    def matches(self, prompt: str) -> bool:
        """Check the rule against a prompt (case-insensitive)."""
        return self.pattern.search(prompt.lower()) is not None


def _build_pricing(prompt: str) -> AgentResponse:
    return AgentResponse(
        title="Pricing",
        description="Auto-generated pricing table (fallback)",
        ui=[
            TableNode(
                props=TableProps(
                    columns=[
                        TableColumn(key="tier", header="Tier"),
                        TableColumn(key="price", header="Price"),
                        TableColumn(key="features", header="Features"),
                    ],
                    rows=[
                        {"tier": "Basic", "price": "$10/mo", "features": "Feature A, Feature B"},
                        {"tier": "Pro", "price": "$20/mo", "features": "Feature A, Feature B, Feature C"},
                    ],
                )
            )
        ],
        suggestions=["Show enterprise tier", "Add billing cycle switcher"],
    )


def _stat_card(label: str, value: str, hint: str) -> ContainerNode:
    """Small vertical block: muted label, headline value, caption hint."""
    return ContainerNode(
        props=ContainerProps(direction="column", gap=8),
        children=[
            TextNode(props=TextProps(text=label, variant="muted")),
            HeadingNode(props=HeadingProps(text=value, level=2)),
            TextNode(props=TextProps(text=hint, variant="caption")),
        ],
    )


def _build_dashboard(prompt: str) -> AgentResponse:
    return AgentResponse(
        title="Dashboard",
        description="Auto-generated stats card (fallback)",
        ui=[
            ContainerNode(
                props=ContainerProps(direction="row", gap=16),
                children=[
                    _stat_card("Users", "1,234", "+12% MoM"),
                    _stat_card("Revenue", "$56,789", "+5% MoM"),
                    _stat_card("Conversion", "3.2%", "+0.3 pp"),
                ],
            )
        ],
        suggestions=["Show last 7 days", "Add sparkline", "Breakdown by segment"],
    )


def _build_echo(prompt: str) -> AgentResponse:
    return AgentResponse(
        title="Generated UI",
        description="Auto-generated fallback based on your prompt",
        ui=[
            ContainerNode(
                props=ContainerProps(direction="column", gap=12),
                children=[
                    HeadingNode(props=HeadingProps(text="Request", level=3)),
                    TextNode(props=TextProps(text=prompt, variant="body")),
                ],
            )
        ],
        suggestions=["Clarify fields or layout", "Include data examples"],
    )


FALLBACK_RULES: list[FallbackRule] = [
    FallbackRule("pricing", re.compile(r"pricing|plans|tiers?"), _build_pricing),
    FallbackRule("dashboard", re.compile(r"dashboard|stat|kpi|metric|card"), _build_dashboard),
]


def build_fallback_response(prompt: str) -> AgentResponse:
    """Build a best-effort response close to the user's request.

    Args:
        prompt: The original user prompt

    Returns:
        AgentResponse without node ids; callers normalize it like any
        generated response
    """
    for rule in FALLBACK_RULES:
        if rule.matches(prompt):
            return rule.build(prompt)
    return _build_echo(prompt)
