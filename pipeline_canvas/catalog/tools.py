"""Tool registry - connectors shared by the settings screen and the canvas palette.

Each tool has a unique display name (which doubles as its key), an icon key
and a lifecycle category. Categories carry a fixed display order and a color.

Lookups never raise: the registry is fed partially-specified settings
payloads, so an unregistered name yields None and callers decide what to do.

Public API:
    Category            - str enum of the six CI/CD lifecycle phases.
    Tool                - frozen dataclass (name, icon_key, category).
    TOOLS_CONFIG        - read-only name → Tool mapping.
    CATEGORY_TOOLS      - read-only Category → tool names (settings order).
    CATEGORY_COLORS     - read-only Category → hex color.
    CATEGORY_ORDER      - display order of categories.
    lookup_tool()       - Tool or None.
    tools_for_category() - tuple of names, empty when unknown.
    enabled_tools()     - flattened, deduplicated set of selected names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

logger = logging.getLogger("pipeline_canvas.catalog.tools")


class Category(str, Enum):
    """CI/CD lifecycle phase a tool belongs to."""

    PLAN = "plan"
    CODE = "code"
    BUILD = "build"
    TEST = "test"
    RELEASE = "release"
    DEPLOY = "deploy"


@dataclass(frozen=True)
class Tool:
    """Display metadata for one connector.

    name:      Unique display name, also the registry key (e.g. "GitHub Actions").
    icon_key:  Key into the icon set used by the renderer (e.g. "github").
    category:  Lifecycle phase the tool is filed under.
    """

    name: str
    icon_key: str
    category: Category


def _tools(category: Category, *pairs: tuple[str, str]) -> list[Tool]:
    return [Tool(name=name, icon_key=icon, category=category) for name, icon in pairs]


# ---------------------------------------------------------------------------
# Registry tables
# ---------------------------------------------------------------------------

_ALL_TOOLS: list[Tool] = [
    *_tools(
        Category.PLAN,
        ("Jira", "jira"),
        ("Azure DevOps", "azdo"),
        ("Trello", "trello"),
        ("Asana", "asana"),
    ),
    *_tools(
        Category.CODE,
        ("GitHub", "github"),
        ("GitLab", "gitlab"),
        ("Azure Repos", "azure"),
        ("Bitbucket", "bitbucket"),
        ("SonarQube", "sonarqube"),
    ),
    *_tools(
        Category.BUILD,
        ("Jenkins", "jenkins"),
        ("GitHub Actions", "github"),
        ("CircleCI", "circleci"),
        ("AWS CodeBuild", "aws"),
        ("Google Cloud Build", "cloudbuild"),
    ),
    *_tools(
        Category.TEST,
        ("Cypress", "cypress"),
        ("Selenium", "selenium"),
        ("Jest", "jest"),
        ("Tricentis Tosca", "asana"),
    ),
    *_tools(
        Category.RELEASE,
        ("Argo CD", "argo"),
        ("ServiceNow", "slack"),
    ),
    *_tools(
        Category.DEPLOY,
        ("Kubernetes", "kubernetes"),
        ("Helm", "helm"),
        ("Terraform", "terraform"),
        ("Ansible", "ansible"),
        ("Docker", "docker"),
        ("AWS CodePipeline", "codepipeline"),
        ("Cloud Foundry", "cloudfoundry"),
    ),
]

TOOLS_CONFIG: Mapping[str, Tool] = MappingProxyType({t.name: t for t in _ALL_TOOLS})

# Settings-screen lists. "Azure DevOps" is registered once (as a plan tool) but
# is offered under build and release as well.
CATEGORY_TOOLS: Mapping[Category, tuple[str, ...]] = MappingProxyType({
    Category.PLAN: ("Jira", "Azure DevOps", "Trello", "Asana"),
    Category.CODE: ("GitHub", "GitLab", "Azure Repos", "Bitbucket", "SonarQube"),
    Category.BUILD: (
        "Jenkins",
        "GitHub Actions",
        "CircleCI",
        "AWS CodeBuild",
        "Google Cloud Build",
        "Azure DevOps",
    ),
    Category.TEST: ("Cypress", "Selenium", "Jest", "Tricentis Tosca"),
    Category.RELEASE: ("Argo CD", "ServiceNow", "Azure DevOps"),
    Category.DEPLOY: (
        "Kubernetes",
        "Helm",
        "Terraform",
        "Ansible",
        "Docker",
        "AWS CodePipeline",
        "Cloud Foundry",
    ),
})

CATEGORY_COLORS: Mapping[Category, str] = MappingProxyType({
    Category.PLAN: "#6366F1",
    Category.CODE: "#22C55E",
    Category.BUILD: "#F59E0B",
    Category.TEST: "#06B6D4",
    Category.RELEASE: "#EC4899",
    Category.DEPLOY: "#8B5CF6",
})

CATEGORY_ORDER: tuple[Category, ...] = (
    Category.PLAN,
    Category.CODE,
    Category.BUILD,
    Category.TEST,
    Category.RELEASE,
    Category.DEPLOY,
)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def _coerce_category(category: Category | str) -> Category | None:
    if isinstance(category, Category):
        return category
    try:
        return Category(category)
    except ValueError:
        return None


def lookup_tool(name: str) -> Tool | None:
    """Return the Tool registered under `name`, or None when unregistered."""
    return TOOLS_CONFIG.get(name)


def tools_for_category(category: Category | str) -> tuple[str, ...]:
    """Tool names offered under `category`, in declaration order.

    Accepts the enum or its string value. Unknown categories yield ().
    """
    cat = _coerce_category(category)
    if cat is None:
        logger.debug("Unknown tool category %r", category)
        return ()
    return CATEGORY_TOOLS.get(cat, ())


def enabled_tools(selection: Mapping[Category | str, Iterable[str]]) -> frozenset[str]:
    """Flatten a category → tool-names selection into a set of tool names.

    Categories are not checked; a tool selected under several categories
    appears once.
    """
    enabled: set[str] = set()
    for tools in selection.values():
        enabled.update(tools)
    return frozenset(enabled)


def category_color(category: Category | str) -> str | None:
    cat = _coerce_category(category)
    return CATEGORY_COLORS.get(cat) if cat is not None else None


def tools_by_category() -> dict[Category, tuple[Tool, ...]]:
    """Registered tools grouped by category, in display order.

    Names listed for a category but missing from TOOLS_CONFIG are skipped.
    """
    grouped: dict[Category, tuple[Tool, ...]] = {}
    for cat in CATEGORY_ORDER:
        found = []
        for name in CATEGORY_TOOLS[cat]:
            tool = lookup_tool(name)
            if tool is None:
                logger.warning("Category %s lists unregistered tool %r", cat.value, name)
                continue
            found.append(tool)
        grouped[cat] = tuple(found)
    return grouped
