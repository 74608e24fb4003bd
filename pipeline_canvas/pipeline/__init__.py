"""Pipeline derivation - from a deep link or template to an editable canvas pipeline.

Public surface:
    URLPipelineParams, PipelineState, TemplateData     - session values
    from_url_params, from_template_data                - state derivation
    is_valid_deployment_type                           - external input guard
    parse_query, encode_query, build_canvas_url        - query-string codec
    node_type_for, UNMAPPED_NODE_TYPE                  - step-to-node mapper
    NodeIdGenerator                                    - session-scoped node ids
    expand_template, expand_steps, PipelineFlow        - template expansion
    CanvasSession                                      - canvas entry point
    to_yaml, from_yaml, PipelineYAMLError              - YAML documents
"""

from pipeline_canvas.pipeline.flow import (
    CanvasEdge,
    CanvasNode,
    PipelineFlow,
    Position,
    StageNotifications,
    expand_steps,
    expand_template,
)
from pipeline_canvas.pipeline.mapper import (
    STEP_KIND_TO_NODE_TYPE,
    UNMAPPED_NODE_TYPE,
    node_type_for,
)
from pipeline_canvas.pipeline.node_ids import NodeIdGenerator
from pipeline_canvas.pipeline.session import CanvasSession
from pipeline_canvas.pipeline.state import (
    DEFAULT_DEPLOYMENT_TYPE,
    DEFAULT_MODE,
    DEFAULT_PIPELINE_NAME,
    DeploymentType,
    PipelineMode,
    PipelineState,
    TemplateData,
    URLPipelineParams,
    from_template_data,
    from_url_params,
    is_valid_deployment_type,
    storage_key,
)
from pipeline_canvas.pipeline.url_codec import build_canvas_url, encode_query, parse_query
from pipeline_canvas.pipeline.yaml_io import (
    LoadedPipeline,
    PipelineYAMLError,
    from_yaml,
    sample_yaml,
    to_yaml,
)

__all__ = [
    # State
    "DEFAULT_DEPLOYMENT_TYPE",
    "DEFAULT_MODE",
    "DEFAULT_PIPELINE_NAME",
    "DeploymentType",
    "PipelineMode",
    "PipelineState",
    "TemplateData",
    "URLPipelineParams",
    "from_template_data",
    "from_url_params",
    "is_valid_deployment_type",
    "storage_key",
    # URL codec
    "build_canvas_url",
    "encode_query",
    "parse_query",
    # Mapper
    "STEP_KIND_TO_NODE_TYPE",
    "UNMAPPED_NODE_TYPE",
    "node_type_for",
    # Node ids
    "NodeIdGenerator",
    # Expansion
    "CanvasEdge",
    "CanvasNode",
    "PipelineFlow",
    "Position",
    "StageNotifications",
    "expand_steps",
    "expand_template",
    # Session
    "CanvasSession",
    # YAML
    "LoadedPipeline",
    "PipelineYAMLError",
    "from_yaml",
    "sample_yaml",
    "to_yaml",
]
