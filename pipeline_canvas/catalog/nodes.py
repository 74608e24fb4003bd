"""Workflow node vocabulary - every node type the canvas can render, with labels.

Node type identifiers fall into families:
  node_*              - deployment environments (dev, QA, prod)
  <category>_<tool>   - connectors (plan_jira, build_jenkins, deploy_helm, ...)
  approval_*          - approval gates
  note, comment       - annotations

Internally node types are NodeType members. Strings coming from outside
(URLs, YAML documents, stale saved pipelines) go through parse_node_type()
or label_for(), both of which degrade instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

logger = logging.getLogger("pipeline_canvas.catalog.nodes")

UNKNOWN_LABEL = "Unknown"


class NodeFamily(str, Enum):
    ENVIRONMENT = "environment"
    PLAN = "plan"
    CODE = "code"
    BUILD = "build"
    TEST = "test"
    RELEASE = "release"
    DEPLOY = "deploy"
    APPROVAL = "approval"
    ANNOTATION = "annotation"


class NodeType(str, Enum):
    """Closed set of node type identifiers understood by the canvas."""

    # Environments
    NODE_DEV = "node_dev"
    NODE_QA = "node_qa"
    NODE_PROD = "node_prod"
    # Plan
    PLAN_JIRA = "plan_jira"
    PLAN_AZURE_DEVOPS = "plan_azure_devops"
    PLAN_TRELLO = "plan_trello"
    PLAN_ASANA = "plan_asana"
    # Code
    CODE_GITHUB = "code_github"
    CODE_GITLAB = "code_gitlab"
    CODE_AZURE_REPOS = "code_azure_repos"
    CODE_BITBUCKET = "code_bitbucket"
    CODE_SONARQUBE = "code_sonarqube"
    # Build
    BUILD_JENKINS = "build_jenkins"
    BUILD_GITHUB_ACTIONS = "build_github_actions"
    BUILD_CIRCLECI = "build_circleci"
    BUILD_AWS_CODEBUILD = "build_aws_codebuild"
    BUILD_GOOGLE_CLOUD_BUILD = "build_google_cloud_build"
    BUILD_AZURE_DEVOPS = "build_azure_devops"
    # Test
    TEST_CYPRESS = "test_cypress"
    TEST_SELENIUM = "test_selenium"
    TEST_JEST = "test_jest"
    TEST_TRICENTIS_TOSCA = "test_tricentis_tosca"
    # Release
    RELEASE_ARGO_CD = "release_argo_cd"
    RELEASE_SERVICENOW = "release_servicenow"
    RELEASE_AZURE_DEVOPS = "release_azure_devops"
    # Deploy
    DEPLOY_KUBERNETES = "deploy_kubernetes"
    DEPLOY_HELM = "deploy_helm"
    DEPLOY_TERRAFORM = "deploy_terraform"
    DEPLOY_ANSIBLE = "deploy_ansible"
    DEPLOY_DOCKER = "deploy_docker"
    DEPLOY_AWS_CODEPIPELINE = "deploy_aws_codepipeline"
    DEPLOY_CLOUDFOUNDRY = "deploy_cloudfoundry"
    # Approval
    APPROVAL_MANUAL = "approval_manual"
    APPROVAL_SLACK = "approval_slack"
    APPROVAL_TEAMS = "approval_teams"
    # Annotations
    NOTE = "note"
    COMMENT = "comment"

    @property
    def family(self) -> NodeFamily:
        if self in (NodeType.NOTE, NodeType.COMMENT):
            return NodeFamily.ANNOTATION
        prefix = self.value.split("_", 1)[0]
        if prefix == "node":
            return NodeFamily.ENVIRONMENT
        return NodeFamily(prefix)


NODE_LABELS: Mapping[NodeType, str] = MappingProxyType({
    NodeType.NODE_DEV: "Development",
    NodeType.NODE_QA: "QA/Staging",
    NodeType.NODE_PROD: "Production",
    NodeType.PLAN_JIRA: "Jira",
    NodeType.PLAN_AZURE_DEVOPS: "Azure DevOps",
    NodeType.PLAN_TRELLO: "Trello",
    NodeType.PLAN_ASANA: "Asana",
    NodeType.CODE_GITHUB: "GitHub",
    NodeType.CODE_GITLAB: "GitLab",
    NodeType.CODE_AZURE_REPOS: "Azure Repos",
    NodeType.CODE_BITBUCKET: "Bitbucket",
    NodeType.CODE_SONARQUBE: "SonarQube",
    NodeType.BUILD_JENKINS: "Jenkins",
    NodeType.BUILD_GITHUB_ACTIONS: "GitHub Actions",
    NodeType.BUILD_CIRCLECI: "CircleCI",
    NodeType.BUILD_AWS_CODEBUILD: "AWS CodeBuild",
    NodeType.BUILD_GOOGLE_CLOUD_BUILD: "Google Cloud Build",
    NodeType.BUILD_AZURE_DEVOPS: "Azure Pipelines",
    NodeType.TEST_CYPRESS: "Cypress",
    NodeType.TEST_SELENIUM: "Selenium",
    NodeType.TEST_JEST: "Jest",
    NodeType.TEST_TRICENTIS_TOSCA: "Tricentis Tosca",
    NodeType.RELEASE_ARGO_CD: "Argo CD",
    NodeType.RELEASE_SERVICENOW: "ServiceNow",
    NodeType.RELEASE_AZURE_DEVOPS: "Azure DevOps Release",
    NodeType.DEPLOY_KUBERNETES: "Kubernetes",
    NodeType.DEPLOY_HELM: "Helm",
    NodeType.DEPLOY_TERRAFORM: "Terraform",
    NodeType.DEPLOY_ANSIBLE: "Ansible",
    NodeType.DEPLOY_DOCKER: "Docker",
    NodeType.DEPLOY_AWS_CODEPIPELINE: "AWS CodePipeline",
    NodeType.DEPLOY_CLOUDFOUNDRY: "Cloud Foundry",
    NodeType.APPROVAL_MANUAL: "Manual Approval",
    NodeType.APPROVAL_SLACK: "Slack Approval",
    NodeType.APPROVAL_TEAMS: "Teams Approval",
    NodeType.NOTE: "Sticky Note",
    NodeType.COMMENT: "Comment",
})


def parse_node_type(value: object) -> NodeType | None:
    """Boundary parser: NodeType for a known identifier, else None."""
    if isinstance(value, NodeType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return NodeType(value)
    except ValueError:
        logger.debug("Unrecognized node type %r", value)
        return None


def label_for(node_type: NodeType | str) -> str:
    """Human-readable label for a node type; "Unknown" for anything unlisted.

    Total over every input: the label table is not guaranteed to cover every
    producer of node type strings.
    """
    parsed = parse_node_type(node_type)
    if parsed is None:
        return UNKNOWN_LABEL
    return NODE_LABELS.get(parsed, UNKNOWN_LABEL)


def node_types_for_family(family: NodeFamily | str) -> tuple[NodeType, ...]:
    fam = NodeFamily(family)
    return tuple(t for t in NodeType if t.family is fam)
