"""Canvas session - what the canvas editor starts from when a deep link is opened.

    session = CanvasSession.open("?mode=edit&templateId=fiori-app&enterprise=Acme&entity=Billing")
    session.state.pipeline_name        # "Acme Billing Pipeline"
    session.flow.to_render_payload()   # 6 nodes, GitHub → ... → Kubernetes

Steps performed by open():
  1. parse the query string (defaults for anything missing)
  2. guard the deployment type (invalid → default, with a warning)
  3. derive the pipeline state
  4. expand the template named by templateId, if any, with the session's
     own NodeIdGenerator

Each session owns its generator, so two sessions never hand out colliding
sequences. Sessions are single-threaded by contract.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from pipeline_canvas.catalog.nodes import NodeType, label_for
from pipeline_canvas.config import CanvasSettings
from pipeline_canvas.pipeline.flow import (
    CanvasEdge,
    CanvasNode,
    PipelineFlow,
    edge_id,
    expand_template,
    position_for,
)
from pipeline_canvas.pipeline.node_ids import NodeIdGenerator
from pipeline_canvas.pipeline.state import (
    DEFAULT_DEPLOYMENT_TYPE,
    PipelineState,
    URLPipelineParams,
    from_url_params,
    is_valid_deployment_type,
)
from pipeline_canvas.pipeline.url_codec import build_canvas_url, parse_query
from pipeline_canvas.pipeline.yaml_io import from_yaml, to_yaml

logger = logging.getLogger("pipeline_canvas.pipeline.session")


@dataclass
class CanvasSession:
    """Mutable editing session: parameters, derived state and the current flow."""

    params: URLPipelineParams
    state: PipelineState
    ids: NodeIdGenerator
    settings: CanvasSettings
    flow: PipelineFlow = field(default_factory=PipelineFlow)

    @classmethod
    def open(
        cls,
        query: str,
        settings: CanvasSettings | None = None,
        ids: NodeIdGenerator | None = None,
    ) -> CanvasSession:
        settings = settings or CanvasSettings()
        ids = ids or NodeIdGenerator(prefix=settings.node_id_prefix)

        params = parse_query(query)
        if not is_valid_deployment_type(params.deployment_type):
            logger.warning(
                "Ignoring invalid deployment type %r; using %s",
                params.deployment_type, DEFAULT_DEPLOYMENT_TYPE.value,
            )
            params = dataclasses.replace(params, deployment_type=DEFAULT_DEPLOYMENT_TYPE.value)

        session = cls(
            params=params,
            state=from_url_params(params),
            ids=ids,
            settings=settings,
        )
        if params.template_id:
            session.flow = expand_template(
                params.template_id,
                ids,
                layout=settings.layout,
                fallback=settings.unmapped_step_fallback,
            )
        logger.info(
            "Opened canvas session %r (mode=%s, template=%r, nodes=%d)",
            session.state.pipeline_name, params.mode, params.template_id, len(session.flow.nodes),
        )
        return session

    def canvas_url(self) -> str:
        """Deep link that reopens this session's parameters."""
        return build_canvas_url(self.params, path=self.settings.canvas_path)

    def add_node(
        self,
        node_type: NodeType,
        label: str | None = None,
        connect_from: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> CanvasNode:
        """Append a palette node, optionally wired from an existing node.

        Raises KeyError when connect_from names no node in the flow.
        """
        if connect_from is not None and self.flow.node(connect_from) is None:
            raise KeyError(f"No node {connect_from!r} in this session")

        node = CanvasNode(
            id=self.ids.next_id(),
            node_type=node_type,
            label=label or label_for(node_type),
            position=position_for(len(self.flow.nodes), self.settings.layout),
            config=dict(config or {}),
        )
        edges = self.flow.edges
        if connect_from is not None:
            edges = edges + (
                CanvasEdge(id=edge_id(connect_from, node.id), source=connect_from, target=node.id),
            )
        self.flow = PipelineFlow(nodes=self.flow.nodes + (node,), edges=edges)
        return node

    def to_yaml(self) -> str:
        return to_yaml(
            self.flow,
            self.state,
            enterprise=self.params.enterprise,
            entity=self.params.entity,
        )

    def load_yaml(self, text: str) -> None:
        """Replace the flow (and name/deployment type) with a YAML document.

        Loaded nodes take ids from this session's generator. Raises
        PipelineYAMLError on a malformed document; the session is left as is.
        """
        loaded = from_yaml(text, ids=self.ids)
        self.flow = loaded.flow
        self.state = dataclasses.replace(
            self.state,
            pipeline_name=loaded.metadata.name or self.state.pipeline_name,
            deployment_type=loaded.metadata.deployment_type.value,
        )
