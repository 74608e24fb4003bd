"""Pipeline YAML documents - export a canvas pipeline and load it back.

Document shape (apiVersion pipeline/v1):

    apiVersion: pipeline/v1
    kind: Pipeline
    metadata:
      name: Acme Billing Pipeline
      deploymentType: Integration
      createdAt / updatedAt: ISO-8601 timestamps
      version: 1.0.0
    spec:
      stages:
        - name: Source Code
          type: code_github
          position: {x: 250, y: 100}
        - name: Build UI5 App
          type: build_jenkins
          dependsOn: [Source Code]
          notifications: {email: true, slack: false}
      variables / notifications / triggers

Stages reference each other by name (dependsOn); node and edge ids are never
written. Stage names are unique: a repeated node label is exported with a
numeric suffix and the label itself kept under `label`. On load, nodes get
fresh ids from a NodeIdGenerator and edges are rebuilt from dependsOn.

Loading is the one place in the package that raises: a malformed document is
reported to the caller as PipelineYAMLError, never silently defaulted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pipeline_canvas.catalog.nodes import NodeType, parse_node_type
from pipeline_canvas.pipeline.flow import (
    CanvasEdge,
    CanvasNode,
    PipelineFlow,
    Position,
    StageNotifications,
    edge_id,
    position_for,
)
from pipeline_canvas.pipeline.node_ids import NodeIdGenerator
from pipeline_canvas.pipeline.state import DeploymentType, PipelineState

logger = logging.getLogger("pipeline_canvas.pipeline.yaml_io")

API_VERSION = "pipeline/v1"
KIND = "Pipeline"
DOCUMENT_VERSION = "1.0.0"


class PipelineYAMLError(ValueError):
    """Raised when a pipeline YAML document cannot be parsed or validated."""


# ---------------------------------------------------------------------------
# Document models
# ---------------------------------------------------------------------------


class _DocModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _scalar_to_str(v: object) -> object:
    """YAML reads unquoted 2024 or 2026-01-05 as int or date; text fields want str."""
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return str(v)
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return v


class StagePosition(_DocModel):
    x: float
    y: float


class StageNotificationFlags(_DocModel):
    email: bool = False
    slack: bool = False


class PipelineStage(_DocModel):
    name: str
    label: str | None = None
    type: str
    description: str | None = None
    depends_on: list[str] | None = Field(None, alias="dependsOn")
    config: dict[str, Any] = Field(default_factory=dict)
    position: StagePosition | None = None
    notifications: StageNotificationFlags | None = None
    status: str | None = None
    duration: str | None = None

    @field_validator("name", "label", "description", "duration", mode="before")
    @classmethod
    def text_to_str(cls, v: object) -> object:
        return _scalar_to_str(v)

    @field_validator("depends_on", mode="before")
    @classmethod
    def dependencies_to_str(cls, v: object) -> object:
        if isinstance(v, list):
            return [_scalar_to_str(item) for item in v]
        return v


class PipelineMetadata(_DocModel):
    name: str
    description: str | None = None
    enterprise: str | None = None
    entity: str | None = None
    deployment_type: DeploymentType = Field(..., alias="deploymentType")
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")
    version: str = DOCUMENT_VERSION

    @field_validator("name", "description", "enterprise", "entity", "version", mode="before")
    @classmethod
    def text_to_str(cls, v: object) -> object:
        return _scalar_to_str(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def timestamp_to_str(cls, v: object) -> object:
        """Unquoted timestamps come back from YAML as datetime objects."""
        if isinstance(v, datetime):
            return v.isoformat()
        return v


class PipelineNotifications(_DocModel):
    email: list[str] = Field(default_factory=list)
    slack: list[str] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)


class PipelineTriggers(_DocModel):
    push: bool = False
    pull_request: bool = Field(False, alias="pullRequest")
    schedule: str | None = None


class PipelineSpec(_DocModel):
    stages: list[PipelineStage] = Field(default_factory=list)
    variables: dict[str, str] = Field(default_factory=dict)
    notifications: PipelineNotifications = Field(default_factory=PipelineNotifications)
    triggers: PipelineTriggers = Field(default_factory=PipelineTriggers)


class PipelineDocument(_DocModel):
    api_version: str = Field(API_VERSION, alias="apiVersion")
    kind: str = KIND
    metadata: PipelineMetadata
    spec: PipelineSpec = Field(default_factory=PipelineSpec)


@dataclass(frozen=True)
class LoadedPipeline:
    flow: PipelineFlow
    metadata: PipelineMetadata

    @property
    def state(self) -> PipelineState:
        return PipelineState(
            pipeline_name=self.metadata.name,
            deployment_type=self.metadata.deployment_type.value,
            description=self.metadata.description or "",
        )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _dump(document: PipelineDocument) -> str:
    payload = document.model_dump(mode="json", by_alias=True, exclude_none=True)
    return yaml.safe_dump(payload, sort_keys=False, indent=2, width=120, allow_unicode=True)


def _stage_names(nodes: tuple[CanvasNode, ...]) -> dict[str, str]:
    """Node id -> stage name. Stage names are unique within a document, so a
    repeated label gets a numeric suffix ("Jenkins", "Jenkins-2").
    """
    names: dict[str, str] = {}
    used: set[str] = set()
    for node in nodes:
        base = node.label or f"stage-{node.id}"
        name, n = base, 1
        while name in used:
            n += 1
            name = f"{base}-{n}"
        used.add(name)
        names[node.id] = name
    return names


def _stage_notifications(node: CanvasNode) -> StageNotificationFlags | None:
    if node.notifications is None:
        return None
    return StageNotificationFlags(email=node.notifications.email, slack=node.notifications.slack)


def to_yaml(
    flow: PipelineFlow,
    state: PipelineState,
    enterprise: str = "",
    entity: str = "",
    now: datetime | None = None,
) -> str:
    """Serialize a canvas pipeline to a pipeline/v1 YAML document.

    Raises PipelineYAMLError when state.deployment_type is not a valid
    deployment type; callers validate before exporting.
    """
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    names = _stage_names(flow.nodes)
    depends: dict[str, list[str]] = {}
    for edge in flow.edges:
        depends.setdefault(edge.target, []).append(
            names.get(edge.source, f"stage-{edge.source}")
        )

    stages = [
        PipelineStage(
            name=names[node.id],
            label=node.label if node.label and node.label != names[node.id] else None,
            type=node.node_type_value,
            description=node.description,
            depends_on=depends.get(node.id) or None,
            config=dict(node.config),
            position=StagePosition(x=node.position.x, y=node.position.y),
            notifications=_stage_notifications(node),
            status=node.status,
            duration=node.duration,
        )
        for node in flow.nodes
    ]

    try:
        document = PipelineDocument(
            metadata=PipelineMetadata(
                name=state.pipeline_name,
                description=state.description or None,
                enterprise=enterprise or None,
                entity=entity or None,
                deployment_type=state.deployment_type,
                created_at=timestamp,
                updated_at=timestamp,
            ),
            spec=PipelineSpec(stages=stages),
        )
    except ValidationError as exc:
        raise PipelineYAMLError(f"Cannot export pipeline {state.pipeline_name!r}: {exc}") from exc
    return _dump(document)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def from_yaml(text: str, ids: NodeIdGenerator | None = None) -> LoadedPipeline:
    """Parse a pipeline/v1 YAML document into canvas nodes and edges.

    Stages without a position are laid out horizontally. Stage types that are
    not NodeType members are kept as raw strings (they render as "Unknown").
    dependsOn entries naming no stage are dropped with a warning. A stage's
    label, when present, becomes the node label; otherwise its name does.
    Duplicate stage names make dependsOn ambiguous and raise PipelineYAMLError.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise PipelineYAMLError(f"Failed to parse pipeline YAML: {exc}") from exc

    if not isinstance(raw, dict) or raw.get("kind") != KIND:
        raise PipelineYAMLError("Failed to parse pipeline YAML: Invalid pipeline YAML format")

    try:
        document = PipelineDocument.model_validate(raw)
    except ValidationError as exc:
        raise PipelineYAMLError(f"Failed to parse pipeline YAML: {exc}") from exc

    seen: set[str] = set()
    for stage in document.spec.stages:
        if stage.name in seen:
            raise PipelineYAMLError(
                f"Failed to parse pipeline YAML: duplicate stage name {stage.name!r}"
            )
        seen.add(stage.name)

    ids = ids or NodeIdGenerator()
    nodes: list[CanvasNode] = []
    name_to_id: dict[str, str] = {}
    for index, stage in enumerate(document.spec.stages):
        node_id = ids.next_id()
        name_to_id[stage.name] = node_id
        node_type: NodeType | str = parse_node_type(stage.type) or stage.type
        position = (
            Position(x=stage.position.x, y=stage.position.y)
            if stage.position is not None
            else position_for(index, "horizontal")
        )
        nodes.append(CanvasNode(
            id=node_id,
            node_type=node_type,
            label=stage.label or stage.name,
            position=position,
            status=stage.status,
            description=stage.description,
            config=dict(stage.config),
            duration=stage.duration,
            notifications=(
                StageNotifications(email=stage.notifications.email, slack=stage.notifications.slack)
                if stage.notifications is not None
                else None
            ),
        ))

    edges: list[CanvasEdge] = []
    for stage in document.spec.stages:
        target = name_to_id[stage.name]
        for dependency in stage.depends_on or []:
            source = name_to_id.get(dependency)
            if source is None:
                logger.warning("Stage %r depends on unknown stage %r", stage.name, dependency)
                continue
            edges.append(CanvasEdge(id=edge_id(source, target), source=source, target=target))

    logger.debug(
        "Loaded pipeline %r: %d nodes, %d edges",
        document.metadata.name, len(nodes), len(edges),
    )
    return LoadedPipeline(
        flow=PipelineFlow(nodes=tuple(nodes), edges=tuple(edges)),
        metadata=document.metadata,
    )


# ---------------------------------------------------------------------------
# Sample document
# ---------------------------------------------------------------------------

_SAMPLE_STAGES: list[dict[str, Any]] = [
    {
        "name": "source-code",
        "type": NodeType.CODE_GITHUB.value,
        "description": "Fetch source code from repository",
        "config": {"repository": "https://github.com/example/repo", "branch": "main"},
        "position": {"x": 300, "y": 100},
        "notifications": {"email": True, "slack": False},
    },
    {
        "name": "build-application",
        "type": NodeType.BUILD_JENKINS.value,
        "description": "Build the application",
        "dependsOn": ["source-code"],
        "config": {"buildCommand": "npm run build", "outputPath": "dist/"},
        "position": {"x": 550, "y": 100},
        "notifications": {"email": True, "slack": True},
    },
    {
        "name": "run-tests",
        "type": NodeType.TEST_JEST.value,
        "description": "Run unit and integration tests",
        "dependsOn": ["build-application"],
        "config": {"testCommand": "npm test", "coverageThreshold": 80},
        "position": {"x": 800, "y": 100},
        "notifications": {"email": True, "slack": True},
    },
    {
        "name": "deploy-staging",
        "type": NodeType.DEPLOY_KUBERNETES.value,
        "description": "Deploy to staging environment",
        "dependsOn": ["run-tests"],
        "config": {"environment": "staging", "namespace": "staging"},
        "position": {"x": 1050, "y": 100},
        "notifications": {"email": True, "slack": True},
    },
]


def sample_yaml(now: datetime | None = None) -> str:
    """A four-stage demonstration pipeline (GitHub → Jenkins → Jest → Kubernetes)."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    document = PipelineDocument.model_validate({
        "metadata": {
            "name": "sample-pipeline",
            "description": "A sample CI/CD pipeline",
            "enterprise": "Sample Corp",
            "entity": "Sample Project",
            "deploymentType": DeploymentType.INTEGRATION.value,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        },
        "spec": {
            "stages": _SAMPLE_STAGES,
            "variables": {"NODE_VERSION": "18", "ENVIRONMENT": "staging"},
            "notifications": {"email": ["admin@company.com"], "slack": ["#devops"]},
            "triggers": {"push": True, "pullRequest": True},
        },
    })
    return _dump(document)
