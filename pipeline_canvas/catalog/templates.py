"""Template flow catalog - predefined step sequences per deployment scenario.

A template flow is an ordered tuple of StepDescriptor. Order is the layout
order of the generated pipeline: the n-th descriptor becomes the n-th node.
Step kinds are abstract; pipeline.mapper turns them into concrete node types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class StepKind(str, Enum):
    SOURCE = "source"
    BUILD = "build"
    TEST = "test"
    DEPLOY = "deploy"
    APPROVAL = "approval"


@dataclass(frozen=True)
class StepDescriptor:
    """One abstract stage of a template flow.

    id:     Unique within its flow (e.g. "prod-deploy").
    title:  Display title; becomes the node label when non-empty.
    kind:   Abstract step kind.
    """

    id: str
    title: str
    kind: StepKind


def _flow(*steps: tuple[str, str, str]) -> tuple[StepDescriptor, ...]:
    return tuple(StepDescriptor(id=i, title=t, kind=StepKind(k)) for i, t, k in steps)


TEMPLATE_FLOWS: Mapping[str, tuple[StepDescriptor, ...]] = MappingProxyType({
    "sap-integration-suite": _flow(
        ("source", "Source Code", "source"),
        ("validate", "Validate Artifacts", "test"),
        ("build", "Package Integration Flows", "build"),
        ("test-deploy", "Deploy to Test Environment", "deploy"),
        ("integration-test", "Integration Testing", "test"),
        ("approval", "Production Approval", "approval"),
        ("prod-deploy", "Deploy to Production", "deploy"),
        ("monitoring", "Post-Deployment Monitoring", "test"),
    ),
    "sap-s4hana-extension": _flow(
        ("source", "Source Code", "source"),
        ("install", "Install Dependencies", "build"),
        ("build", "Build CAP Application", "build"),
        ("test", "Run Tests", "test"),
        ("package", "Package Application", "build"),
        ("approval", "Deployment Approval", "approval"),
        ("deploy", "Deploy to Cloud Foundry", "deploy"),
        ("verify", "Verify Deployment", "test"),
    ),
    "fiori-app": _flow(
        ("source", "Source Code", "source"),
        ("build", "Build UI5 App", "build"),
        ("test", "UI Tests", "test"),
        ("package", "Create Deployment Package", "build"),
        ("approval", "Release Approval", "approval"),
        ("deploy", "Deploy to Launchpad", "deploy"),
    ),
    "mobile-services": _flow(
        ("source", "Source Code", "source"),
        ("build", "Build Mobile App", "build"),
        ("test", "Device Testing", "test"),
        ("package", "Package for Distribution", "build"),
        ("approval", "Store Approval", "approval"),
        ("deploy", "Deploy to App Store", "deploy"),
    ),
    "bas-devspace": _flow(
        ("source", "Source Code", "source"),
        ("validate", "Validate Configuration", "test"),
        ("build", "Build DevSpace Image", "build"),
        ("test", "Test DevSpace", "test"),
        ("approval", "Deployment Approval", "approval"),
        ("deploy", "Deploy to BAS", "deploy"),
    ),
    "abap-cloud": _flow(
        ("source", "ABAP Source", "source"),
        ("syntax-check", "Syntax Check", "test"),
        ("build", "Build ABAP Package", "build"),
        ("unit-test", "ABAP Unit Tests", "test"),
        ("approval", "Transport Approval", "approval"),
        ("deploy", "Transport to Production", "deploy"),
    ),
})


def flow_for(template_key: str) -> tuple[StepDescriptor, ...]:
    """Ordered steps of a template; () for an unknown key (e.g. a deleted template)."""
    return TEMPLATE_FLOWS.get(template_key, ())


def template_keys() -> tuple[str, ...]:
    return tuple(TEMPLATE_FLOWS)
