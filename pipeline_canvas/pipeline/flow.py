"""Template flow expansion - abstract steps into positioned canvas nodes and edges.

The n-th step becomes the n-th node; each node after the first is joined to
its predecessor by a smoothstep edge. Node types come from the step-to-node
mapper, ids from the caller's NodeIdGenerator.

Layouts:
    vertical    x = 250,             y = 100 + 150 * i   (template load)
    horizontal  x = 300 + 250 * i,   y = 100             (copy from template)

Output handed to the renderer:
    PipelineFlow.to_render_payload() → [{"id", "nodeType", "label"}, ...]
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pipeline_canvas.catalog.nodes import NodeType, label_for
from pipeline_canvas.catalog.templates import StepDescriptor, flow_for
from pipeline_canvas.config import LayoutName, UnmappedFallback
from pipeline_canvas.pipeline.mapper import node_type_for
from pipeline_canvas.pipeline.node_ids import NodeIdGenerator

logger = logging.getLogger("pipeline_canvas.pipeline.flow")

EDGE_TYPE = "smoothstep"
STATUS_PENDING = "pending"

_VERTICAL_X = 250
_VERTICAL_START_Y = 100
_VERTICAL_STEP_Y = 150
_HORIZONTAL_START_X = 300
_HORIZONTAL_STEP_X = 250
_HORIZONTAL_Y = 100


# ---------------------------------------------------------------------------
# Canvas data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class StageNotifications:
    """Per-stage outcome alerts: which channels hear about this stage."""

    email: bool = False
    slack: bool = False


@dataclass(frozen=True)
class CanvasNode:
    """A renderable node on the pipeline canvas.

    id:          Session-unique id from NodeIdGenerator (e.g. "node-3").
    node_type:   NodeType member, or a raw string for types that could not be
                 parsed (unmapped step kinds, foreign YAML).
    label:       Display label.
    position:    Canvas coordinates in pixels.
    status:      Execution status; "pending" for freshly expanded nodes.
    identifier:  "<step kind>_<n>" for template nodes, 1-based.
    stage:       Stage name shown in execution views.
    description: Optional free text.
    config:      Tool-specific settings.
    duration:    Last run duration as reported by the executor (e.g. "2m 13s").
    notifications: Stage alert channels, or None when never configured.
    """

    id: str
    node_type: NodeType | str
    label: str
    position: Position
    status: str | None = STATUS_PENDING
    identifier: str | None = None
    stage: str | None = None
    description: str | None = None
    config: dict[str, Any] = field(default_factory=dict)
    duration: str | None = None
    notifications: StageNotifications | None = None

    @property
    def node_type_value(self) -> str:
        return self.node_type.value if isinstance(self.node_type, NodeType) else self.node_type


@dataclass(frozen=True)
class CanvasEdge:
    id: str
    source: str
    target: str
    type: str = EDGE_TYPE


@dataclass(frozen=True)
class PipelineFlow:
    nodes: tuple[CanvasNode, ...] = ()
    edges: tuple[CanvasEdge, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> CanvasNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def to_render_payload(self) -> list[dict[str, str]]:
        """Ordered {id, nodeType, label} records for the canvas renderer."""
        return [
            {"id": n.id, "nodeType": n.node_type_value, "label": n.label}
            for n in self.nodes
        ]


# ---------------------------------------------------------------------------
# Layout + expansion
# ---------------------------------------------------------------------------


def position_for(index: int, layout: LayoutName = "vertical") -> Position:
    if layout == "horizontal":
        return Position(x=_HORIZONTAL_START_X + index * _HORIZONTAL_STEP_X, y=_HORIZONTAL_Y)
    return Position(x=_VERTICAL_X, y=_VERTICAL_START_Y + index * _VERTICAL_STEP_Y)


def edge_id(source: str, target: str) -> str:
    return f"edge-{source}-{target}"


def chain_edges(nodes: Sequence[CanvasNode]) -> tuple[CanvasEdge, ...]:
    """Edges joining each node to the next, in node order."""
    return tuple(
        CanvasEdge(id=edge_id(prev.id, cur.id), source=prev.id, target=cur.id)
        for prev, cur in zip(nodes, nodes[1:])
    )


def expand_steps(
    steps: Sequence[StepDescriptor],
    ids: NodeIdGenerator,
    layout: LayoutName = "vertical",
    fallback: UnmappedFallback = "sentinel",
) -> PipelineFlow:
    """Expand template steps into a linear pipeline. Order-preserving."""
    nodes: list[CanvasNode] = []
    for index, step in enumerate(steps):
        node_type = node_type_for(step.kind, fallback=fallback)
        label = step.title or label_for(node_type)
        kind = getattr(step.kind, "value", step.kind)
        nodes.append(CanvasNode(
            id=ids.next_id(),
            node_type=node_type,
            label=label,
            position=position_for(index, layout),
            identifier=f"{kind}_{index + 1}",
            stage=label,
        ))
    return PipelineFlow(nodes=tuple(nodes), edges=chain_edges(nodes))


def expand_template(
    template_key: str,
    ids: NodeIdGenerator,
    layout: LayoutName = "vertical",
    fallback: UnmappedFallback = "sentinel",
) -> PipelineFlow:
    """Expand a catalog template; an unknown key yields an empty flow."""
    steps = flow_for(template_key)
    if not steps:
        logger.warning("Unknown template %r; starting with an empty canvas", template_key)
        return PipelineFlow()
    flow = expand_steps(steps, ids, layout=layout, fallback=fallback)
    logger.debug(
        "Expanded template %r into %d nodes, %d edges",
        template_key, len(flow.nodes), len(flow.edges),
    )
    return flow
