"""Query-string codec for canvas deep links.

Canonical key order (also the order encode_query() emits):
    mode, templateId, name, enterprise, entity, deploymentType

parse_query() substitutes defaults for missing or empty values: mode → "edit",
deploymentType → "Integration", everything else → "". Values use
application/x-www-form-urlencoded escaping, so a space travels as "+".

Round-trip: parse_query(encode_query(p)) == p for any p with non-empty values.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlencode, urlsplit

from pipeline_canvas.pipeline.state import (
    DEFAULT_DEPLOYMENT_TYPE,
    DEFAULT_MODE,
    URLPipelineParams,
)

logger = logging.getLogger("pipeline_canvas.pipeline.url_codec")

KEY_MODE = "mode"
KEY_TEMPLATE_ID = "templateId"
KEY_NAME = "name"
KEY_ENTERPRISE = "enterprise"
KEY_ENTITY = "entity"
KEY_DEPLOYMENT_TYPE = "deploymentType"

CANONICAL_KEYS: tuple[str, ...] = (
    KEY_MODE,
    KEY_TEMPLATE_ID,
    KEY_NAME,
    KEY_ENTERPRISE,
    KEY_ENTITY,
    KEY_DEPLOYMENT_TYPE,
)

DEFAULT_CANVAS_PATH = "/pipelines/canvas"


def _strip_to_query(query: str) -> str:
    """Accept 'a=b', '?a=b' or '/path?a=b#frag' and return 'a=b'.

    A bare query string may carry unescaped '?' and '#' inside its values,
    so path and fragment are split off only for a path or an absolute URL.
    """
    parts = urlsplit(query)
    if query.startswith("/") or parts.netloc:
        return parts.query
    if query.startswith("?"):
        return query[1:]
    return query


def parse_query(query: str) -> URLPipelineParams:
    """Parse a query string into URLPipelineParams with defaults applied.

    When a key repeats, the first occurrence wins. Unknown keys are ignored.
    """
    values = parse_qs(_strip_to_query(query or ""), keep_blank_values=True)

    def first(key: str) -> str:
        found = values.get(key)
        return found[0] if found else ""

    params = URLPipelineParams(
        mode=first(KEY_MODE) or DEFAULT_MODE.value,
        template_name=first(KEY_NAME),
        enterprise=first(KEY_ENTERPRISE),
        entity=first(KEY_ENTITY),
        deployment_type=first(KEY_DEPLOYMENT_TYPE) or DEFAULT_DEPLOYMENT_TYPE.value,
        template_id=first(KEY_TEMPLATE_ID),
    )
    logger.debug("Parsed canvas params %r from %r", params, query)
    return params


def encode_query(params: URLPipelineParams) -> str:
    """Encode params as a query string (no leading '?') in canonical key order."""
    return urlencode([
        (KEY_MODE, params.mode),
        (KEY_TEMPLATE_ID, params.template_id),
        (KEY_NAME, params.template_name),
        (KEY_ENTERPRISE, params.enterprise),
        (KEY_ENTITY, params.entity),
        (KEY_DEPLOYMENT_TYPE, params.deployment_type),
    ])


def build_canvas_url(params: URLPipelineParams, path: str = DEFAULT_CANVAS_PATH) -> str:
    """Deep link into the canvas editor, e.g. '/pipelines/canvas?mode=edit&...'."""
    return f"{path}?{encode_query(params)}"
