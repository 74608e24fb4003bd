"""Command-line front end for the pipeline canvas core.

Resolves deep links and templates in the terminal - no canvas needed.

Usage:
    pipeline-canvas templates
    pipeline-canvas resolve "mode=edit&templateId=fiori-app&enterprise=Acme&entity=Billing"
    pipeline-canvas url --template-id abap-cloud --enterprise SAP --entity Finance
    pipeline-canvas export "templateId=bas-devspace&name=DevSpace"
    pipeline-canvas labels
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import ArgumentParser, Namespace

from dotenv import load_dotenv

from pipeline_canvas.catalog.nodes import NODE_LABELS
from pipeline_canvas.catalog.templates import flow_for, template_keys
from pipeline_canvas.config import CanvasSettings
from pipeline_canvas.pipeline.session import CanvasSession
from pipeline_canvas.pipeline.state import (
    DEFAULT_DEPLOYMENT_TYPE,
    DEFAULT_MODE,
    URLPipelineParams,
    is_valid_deployment_type,
)
from pipeline_canvas.pipeline.url_codec import build_canvas_url
from pipeline_canvas.pipeline.yaml_io import PipelineYAMLError


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_templates(args: Namespace, settings: CanvasSettings) -> int:
    for key in template_keys():
        steps = flow_for(key)
        kinds = ", ".join(s.kind.value for s in steps)
        print(f"{key:<24} {len(steps)} steps  [{kinds}]")
    return 0


def _cmd_resolve(args: Namespace, settings: CanvasSettings) -> int:
    session = CanvasSession.open(args.query, settings=settings)
    payload = {
        "state": {
            "pipelineName": session.state.pipeline_name,
            "deploymentType": session.state.deployment_type,
            "description": session.state.description,
        },
        "nodes": session.flow.to_render_payload(),
        "edges": [
            {"id": e.id, "source": e.source, "target": e.target, "type": e.type}
            for e in session.flow.edges
        ],
        "canvasUrl": session.canvas_url(),
    }
    print(json.dumps(payload, indent=2))
    return 0


def _cmd_url(args: Namespace, settings: CanvasSettings) -> int:
    if not is_valid_deployment_type(args.deployment_type):
        print(
            f"Invalid deployment type {args.deployment_type!r}: "
            "expected 'Integration' or 'Extension'",
            file=sys.stderr,
        )
        return 2
    params = URLPipelineParams(
        mode=args.mode,
        template_name=args.name,
        enterprise=args.enterprise,
        entity=args.entity,
        deployment_type=args.deployment_type,
        template_id=args.template_id,
    )
    print(build_canvas_url(params, path=settings.canvas_path))
    return 0


def _cmd_export(args: Namespace, settings: CanvasSettings) -> int:
    session = CanvasSession.open(args.query, settings=settings)
    try:
        sys.stdout.write(session.to_yaml())
    except PipelineYAMLError as e:
        print(f"Export failed: {e}", file=sys.stderr)
        return 1
    return 0


def _cmd_labels(args: Namespace, settings: CanvasSettings) -> int:
    for node_type, label in NODE_LABELS.items():
        print(f"{node_type.value:<28} {node_type.family.value:<12} {label}")
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="pipeline-canvas",
        description="Pipeline canvas core - template resolution and node mapping",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("templates", help="List template flows and their step kinds")

    resolve_p = sub.add_parser("resolve", help="Resolve a canvas query string to JSON")
    resolve_p.add_argument("query", help="Query string, with or without a leading '?'")

    url_p = sub.add_parser("url", help="Build a canvas deep link")
    url_p.add_argument("--mode", default=DEFAULT_MODE.value)
    url_p.add_argument("--template-id", default="")
    url_p.add_argument("--name", default="", help="Explicit pipeline name")
    url_p.add_argument("--enterprise", default="")
    url_p.add_argument("--entity", default="")
    url_p.add_argument("--deployment-type", default=DEFAULT_DEPLOYMENT_TYPE.value)

    export_p = sub.add_parser("export", help="Resolve a query string and print pipeline YAML")
    export_p.add_argument("query")

    sub.add_parser("labels", help="Print the node type vocabulary")
    return parser


_COMMANDS = {
    "templates": _cmd_templates,
    "resolve": _cmd_resolve,
    "url": _cmd_url,
    "export": _cmd_export,
    "labels": _cmd_labels,
}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = CanvasSettings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")

    parser = build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())
