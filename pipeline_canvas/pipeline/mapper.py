"""Step-to-node mapper - default concrete node type for each abstract step kind.

The table is total over StepKind. Step kinds arriving as strings (YAML,
saved pipelines) are parsed here; a string that is not a StepKind does not
raise. By default it maps to UNMAPPED_NODE_TYPE, which is deliberately not a
NodeType member and renders as "Unknown". Callers that still expect the old
behavior (the default deployment-type literal) pass
fallback="deployment_type".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from pipeline_canvas.catalog.nodes import NodeType
from pipeline_canvas.catalog.templates import StepKind
from pipeline_canvas.config import UnmappedFallback
from pipeline_canvas.pipeline.state import DEFAULT_DEPLOYMENT_TYPE

logger = logging.getLogger("pipeline_canvas.pipeline.mapper")

UNMAPPED_NODE_TYPE = "unmapped"

STEP_KIND_TO_NODE_TYPE: Mapping[StepKind, NodeType] = MappingProxyType({
    StepKind.SOURCE: NodeType.CODE_GITHUB,
    StepKind.BUILD: NodeType.BUILD_JENKINS,
    StepKind.TEST: NodeType.TEST_JEST,
    StepKind.DEPLOY: NodeType.DEPLOY_KUBERNETES,
    StepKind.APPROVAL: NodeType.APPROVAL_MANUAL,
})


def node_type_for(
    step_kind: StepKind | str,
    fallback: UnmappedFallback = "sentinel",
) -> NodeType | str:
    """Concrete node type for `step_kind`.

    Returns a NodeType for every StepKind. For an unrecognized string returns
    UNMAPPED_NODE_TYPE, or the default deployment type literal when
    fallback == "deployment_type".
    """
    try:
        kind = StepKind(step_kind)
    except ValueError:
        logger.warning("No node type mapped for step kind %r", step_kind)
        if fallback == "deployment_type":
            return DEFAULT_DEPLOYMENT_TYPE.value
        return UNMAPPED_NODE_TYPE
    return STEP_KIND_TO_NODE_TYPE[kind]
