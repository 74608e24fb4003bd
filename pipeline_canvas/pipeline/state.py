"""Pipeline state derivation - name, deployment type and description.

Two pure entry points build a PipelineState:
  from_url_params()    - canvas opened from a deep link; name falls back from
                         the template name to "<enterprise> <entity> Pipeline"
                         to DEFAULT_PIPELINE_NAME.
  from_template_data() - template metadata already resolved by a collaborator;
                         name taken verbatim.

Deployment types are passed through untouched here. Checking them is the job
of is_valid_deployment_type(), which callers run before trusting a value
from outside.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeploymentType(str, Enum):
    INTEGRATION = "Integration"
    EXTENSION = "Extension"


class PipelineMode(str, Enum):
    EDIT = "edit"
    CREATE = "create"
    PREVIEW = "preview"


DEFAULT_DEPLOYMENT_TYPE = DeploymentType.INTEGRATION
DEFAULT_MODE = PipelineMode.EDIT
DEFAULT_PIPELINE_NAME = "New Pipeline"

_STORAGE_KEY_PREFIX = "pipeline_"


@dataclass(frozen=True)
class URLPipelineParams:
    """Canvas parameters as carried by the query string.

    All fields are plain strings; see url_codec.parse_query() for defaults.
    template_name travels under the "name" key, template_id under "templateId".
    """

    mode: str = DEFAULT_MODE.value
    template_name: str = ""
    enterprise: str = ""
    entity: str = ""
    deployment_type: str = DEFAULT_DEPLOYMENT_TYPE.value
    template_id: str = ""


@dataclass(frozen=True)
class TemplateData:
    name: str
    enterprise: str
    entity: str
    deployment_type: str
    mode: str | None = None


@dataclass(frozen=True)
class PipelineState:
    pipeline_name: str
    deployment_type: str
    description: str


def generate_pipeline_name(template_name: str, enterprise: str, entity: str) -> str:
    if template_name:
        return template_name
    if enterprise and entity:
        return f"{enterprise} {entity} Pipeline"
    return DEFAULT_PIPELINE_NAME


def generate_pipeline_description(enterprise: str, entity: str) -> str:
    """'<enterprise> <entity> Pipeline' when both are known, else ''."""
    if enterprise and entity:
        return f"{enterprise} {entity} Pipeline"
    return ""


def from_url_params(params: URLPipelineParams) -> PipelineState:
    return PipelineState(
        pipeline_name=generate_pipeline_name(
            params.template_name, params.enterprise, params.entity,
        ),
        deployment_type=params.deployment_type,
        description=generate_pipeline_description(params.enterprise, params.entity),
    )


def from_template_data(data: TemplateData) -> PipelineState:
    return PipelineState(
        pipeline_name=data.name,
        deployment_type=data.deployment_type,
        description=generate_pipeline_description(data.enterprise, data.entity),
    )


def is_valid_deployment_type(value: object) -> bool:
    """True iff `value` is exactly "Integration" or "Extension".

    Case-sensitive, no trimming. Non-strings are never valid.
    """
    if not isinstance(value, str):
        return False
    return value in {t.value for t in DeploymentType}


def storage_key(key: str) -> str:
    """Key under which the storage collaborator keeps a pipeline configuration."""
    return f"{_STORAGE_KEY_PREFIX}{key}"
