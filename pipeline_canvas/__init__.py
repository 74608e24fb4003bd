"""Pipeline canvas core - template resolution and workflow-node mapping for CI/CD pipelines.

Subpackages:
    catalog   - static vocabulary: tool registry, node types, template flows
    pipeline  - derivation: URL params, pipeline state, expansion, sessions, YAML

Entry points:
    CanvasSession.open(query) → session with state + expanded flow
    pipeline-canvas CLI       → pipeline_canvas.cli:main
"""

from pipeline_canvas.config import CanvasSettings
from pipeline_canvas.pipeline import CanvasSession

__all__ = ["CanvasSettings", "CanvasSession"]
