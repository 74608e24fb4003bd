"""Static CI/CD vocabulary - tools, node types and template flows.

Everything here is immutable module-level data built once at import time.

Public surface:
    Category, Tool, lookup_tool, tools_for_category, enabled_tools - tool registry
    NodeType, NodeFamily, label_for, parse_node_type                - node vocabulary
    StepKind, StepDescriptor, flow_for, template_keys               - template catalog
"""

from pipeline_canvas.catalog.nodes import (
    NODE_LABELS,
    UNKNOWN_LABEL,
    NodeFamily,
    NodeType,
    label_for,
    node_types_for_family,
    parse_node_type,
)
from pipeline_canvas.catalog.templates import (
    TEMPLATE_FLOWS,
    StepDescriptor,
    StepKind,
    flow_for,
    template_keys,
)
from pipeline_canvas.catalog.tools import (
    CATEGORY_COLORS,
    CATEGORY_ORDER,
    CATEGORY_TOOLS,
    TOOLS_CONFIG,
    Category,
    Tool,
    category_color,
    enabled_tools,
    lookup_tool,
    tools_by_category,
    tools_for_category,
)

__all__ = [
    # Tool registry
    "CATEGORY_COLORS",
    "CATEGORY_ORDER",
    "CATEGORY_TOOLS",
    "TOOLS_CONFIG",
    "Category",
    "Tool",
    "category_color",
    "enabled_tools",
    "lookup_tool",
    "tools_by_category",
    "tools_for_category",
    # Node vocabulary
    "NODE_LABELS",
    "UNKNOWN_LABEL",
    "NodeFamily",
    "NodeType",
    "label_for",
    "node_types_for_family",
    "parse_node_type",
    # Template catalog
    "TEMPLATE_FLOWS",
    "StepDescriptor",
    "StepKind",
    "flow_for",
    "template_keys",
]
