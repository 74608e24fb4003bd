"""Pipeline YAML export/import.

Covers:
- document header and metadata on export
- dependsOn written by stage name, rebuilt as edges on load
- unknown stage types kept as raw strings
- repeated labels exported under unique stage names
- stage notifications carried both ways
- malformed documents raise PipelineYAMLError
- sample document loads cleanly
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import yaml

from pipeline_canvas.catalog.nodes import NodeType, label_for
from pipeline_canvas.pipeline.flow import (
    CanvasNode,
    PipelineFlow,
    StageNotifications,
    chain_edges,
    expand_template,
    position_for,
)
from pipeline_canvas.pipeline.node_ids import NodeIdGenerator
from pipeline_canvas.pipeline.state import PipelineState
from pipeline_canvas.pipeline.yaml_io import (
    PipelineYAMLError,
    from_yaml,
    sample_yaml,
    to_yaml,
)

_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
_STATE = PipelineState(
    pipeline_name="Acme Billing Pipeline",
    deployment_type="Integration",
    description="Acme Billing Pipeline",
)


def _exported(template: str = "fiori-app") -> dict:
    flow = expand_template(template, NodeIdGenerator())
    text = to_yaml(flow, _STATE, enterprise="Acme", entity="Billing", now=_NOW)
    return yaml.safe_load(text)


def _jenkins_chain() -> PipelineFlow:
    """GitHub followed by two Jenkins nodes that share the default label."""
    ids = NodeIdGenerator()
    nodes = tuple(
        CanvasNode(id=ids.next_id(), node_type=node_type, label=label_for(node_type),
                   position=position_for(i))
        for i, node_type in enumerate(
            [NodeType.CODE_GITHUB, NodeType.BUILD_JENKINS, NodeType.BUILD_JENKINS]
        )
    )
    return PipelineFlow(nodes=nodes, edges=chain_edges(nodes))


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class TestToYAML:
    def test_header(self):
        doc = _exported()
        assert doc["apiVersion"] == "pipeline/v1"
        assert doc["kind"] == "Pipeline"

    def test_metadata(self):
        meta = _exported()["metadata"]
        assert meta["name"] == "Acme Billing Pipeline"
        assert meta["enterprise"] == "Acme"
        assert meta["entity"] == "Billing"
        assert meta["deploymentType"] == "Integration"
        assert meta["version"] == "1.0.0"
        assert meta["createdAt"] == _NOW.isoformat()
        assert meta["updatedAt"] == _NOW.isoformat()

    def test_stages_in_node_order(self):
        stages = _exported()["spec"]["stages"]
        assert [s["type"] for s in stages] == [
            "code_github", "build_jenkins", "test_jest",
            "build_jenkins", "approval_manual", "deploy_kubernetes",
        ]

    def test_depends_on_uses_stage_names(self):
        stages = _exported()["spec"]["stages"]
        assert "dependsOn" not in stages[0]
        assert stages[1]["dependsOn"] == ["Source Code"]
        assert stages[5]["dependsOn"] == ["Release Approval"]

    def test_node_ids_not_written(self):
        text = to_yaml(expand_template("fiori-app", NodeIdGenerator()), _STATE, now=_NOW)
        assert "node-1" not in text

    def test_empty_spec_sections(self):
        spec = _exported()["spec"]
        assert spec["variables"] == {}
        assert spec["notifications"] == {"email": [], "slack": [], "teams": []}
        assert spec["triggers"] == {"push": False, "pullRequest": False}

    def test_invalid_deployment_type_rejected(self):
        state = PipelineState("x", "integration", "")
        with pytest.raises(PipelineYAMLError):
            to_yaml(expand_template("fiori-app", NodeIdGenerator()), state, now=_NOW)

    def test_repeated_labels_get_unique_stage_names(self):
        doc = yaml.safe_load(to_yaml(_jenkins_chain(), _STATE, now=_NOW))
        stages = doc["spec"]["stages"]
        jenkins = label_for(NodeType.BUILD_JENKINS)
        assert [s["name"] for s in stages] == ["GitHub", jenkins, f"{jenkins}-2"]
        assert "label" not in stages[1]
        assert stages[2]["label"] == jenkins
        assert stages[2]["dependsOn"] == [jenkins]

    def test_stage_notifications_written(self):
        flow = expand_template("abap-cloud", NodeIdGenerator())
        first = flow.nodes[0]
        flagged = CanvasNode(
            id=first.id, node_type=first.node_type, label=first.label, position=first.position,
            notifications=StageNotifications(email=True, slack=False),
        )
        flow = PipelineFlow(nodes=(flagged,) + flow.nodes[1:], edges=flow.edges)
        stages = yaml.safe_load(to_yaml(flow, _STATE, now=_NOW))["spec"]["stages"]
        assert stages[0]["notifications"] == {"email": True, "slack": False}
        assert "notifications" not in stages[1]


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

_MINIMAL = """
apiVersion: pipeline/v1
kind: Pipeline
metadata:
  name: hand-written
  deploymentType: Extension
  createdAt: 2026-01-05T10:00:00Z
spec:
  stages:
    - name: checkout
      type: code_gitlab
    - name: scan
      type: code_checkmarx
      dependsOn: [checkout]
    - name: ship
      type: deploy_helm
      dependsOn: [scan, missing-stage]
"""


class TestFromYAML:
    def test_nodes_and_edges(self):
        loaded = from_yaml(_MINIMAL)
        nodes = loaded.flow.nodes
        assert [n.id for n in nodes] == ["node-1", "node-2", "node-3"]
        assert nodes[0].node_type is NodeType.CODE_GITLAB
        assert [(e.source, e.target) for e in loaded.flow.edges] == [
            ("node-1", "node-2"),
            ("node-2", "node-3"),
        ]

    def test_unknown_stage_type_kept_raw(self):
        node = from_yaml(_MINIMAL).flow.nodes[1]
        assert node.node_type == "code_checkmarx"
        assert label_for(node.node_type) == "Unknown"

    def test_missing_positions_laid_out_horizontally(self):
        nodes = from_yaml(_MINIMAL).flow.nodes
        assert [(n.position.x, n.position.y) for n in nodes] == [(300, 100), (550, 100), (800, 100)]

    def test_metadata_and_state(self):
        loaded = from_yaml(_MINIMAL)
        assert loaded.metadata.created_at.startswith("2026-01-05T10:00:00")
        assert loaded.state == PipelineState("hand-written", "Extension", "")

    def test_uses_supplied_generator(self):
        ids = NodeIdGenerator(start=5)
        loaded = from_yaml(_MINIMAL, ids=ids)
        assert loaded.flow.nodes[0].id == "node-6"

    def test_round_trip_preserves_positions(self):
        flow = expand_template("abap-cloud", NodeIdGenerator())
        loaded = from_yaml(to_yaml(flow, _STATE, now=_NOW))
        assert [n.position for n in loaded.flow.nodes] == [n.position for n in flow.nodes]
        assert [n.status for n in loaded.flow.nodes] == ["pending"] * 6

    @pytest.mark.parametrize("text", [
        "just a string",
        "kind: Deployment\nmetadata: {name: x, deploymentType: Integration}",
        "- a\n- b",
    ])
    def test_not_a_pipeline(self, text):
        with pytest.raises(PipelineYAMLError, match="Invalid pipeline YAML format"):
            from_yaml(text)

    def test_syntax_error(self):
        with pytest.raises(PipelineYAMLError) as excinfo:
            from_yaml("kind: Pipeline\nmetadata: [unclosed")
        assert isinstance(excinfo.value.__cause__, yaml.YAMLError)

    def test_invalid_deployment_type(self):
        with pytest.raises(PipelineYAMLError):
            from_yaml("kind: Pipeline\nmetadata: {name: x, deploymentType: Hybrid}")

    def test_duplicate_stage_names_rejected(self):
        text = (
            "kind: Pipeline\n"
            "metadata: {name: x, deploymentType: Integration}\n"
            "spec:\n"
            "  stages:\n"
            "    - {name: build, type: build_jenkins}\n"
            "    - {name: build, type: build_maven, dependsOn: [build]}\n"
        )
        ids = NodeIdGenerator()
        with pytest.raises(PipelineYAMLError, match="duplicate stage name"):
            from_yaml(text, ids=ids)
        assert ids.current == 0

    def test_numeric_names_read_as_strings(self):
        text = (
            "kind: Pipeline\n"
            "metadata: {name: 2024, deploymentType: Integration}\n"
            "spec:\n"
            "  stages:\n"
            "    - {name: 1, type: code_github}\n"
            "    - {name: 2, type: build_jenkins, dependsOn: [1]}\n"
        )
        loaded = from_yaml(text)
        assert loaded.metadata.name == "2024"
        assert [n.label for n in loaded.flow.nodes] == ["1", "2"]
        assert len(loaded.flow.edges) == 1

    def test_label_field_restores_node_label(self):
        loaded = from_yaml(to_yaml(_jenkins_chain(), _STATE, now=_NOW))
        assert [n.label for n in loaded.flow.nodes] == ["GitHub", "Jenkins", "Jenkins"]

    def test_repeated_labels_keep_edges(self):
        flow = _jenkins_chain()
        loaded = from_yaml(to_yaml(flow, _STATE, now=_NOW))
        assert [(e.source, e.target) for e in loaded.flow.edges] == [
            ("node-1", "node-2"),
            ("node-2", "node-3"),
        ]

    def test_stage_notifications_loaded(self):
        text = _MINIMAL.replace(
            "      type: code_gitlab\n",
            "      type: code_gitlab\n      notifications: {email: true, slack: false}\n",
        )
        nodes = from_yaml(text).flow.nodes
        assert nodes[0].notifications == StageNotifications(email=True, slack=False)
        assert nodes[1].notifications is None

    def test_error_is_value_error(self):
        assert issubclass(PipelineYAMLError, ValueError)


class TestSampleYAML:
    def test_sample_loads(self):
        loaded = from_yaml(sample_yaml(now=_NOW))
        assert loaded.metadata.name == "sample-pipeline"
        assert [n.label for n in loaded.flow.nodes] == [
            "source-code", "build-application", "run-tests", "deploy-staging",
        ]
        assert len(loaded.flow.edges) == 3
        assert loaded.flow.nodes[2].config["coverageThreshold"] == 80

    def test_sample_stage_notifications_survive_reexport(self):
        loaded = from_yaml(sample_yaml(now=_NOW))
        assert loaded.flow.nodes[0].notifications == StageNotifications(email=True, slack=False)
        assert loaded.flow.nodes[3].notifications == StageNotifications(email=True, slack=True)
        stages = yaml.safe_load(to_yaml(loaded.flow, loaded.state, now=_NOW))["spec"]["stages"]
        assert stages[0]["notifications"] == {"email": True, "slack": False}

    def test_sample_triggers(self):
        doc = yaml.safe_load(sample_yaml(now=_NOW))
        assert doc["spec"]["triggers"] == {"push": True, "pullRequest": True}
        assert doc["spec"]["variables"]["NODE_VERSION"] == "18"
