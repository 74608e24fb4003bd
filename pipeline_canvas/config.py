"""Settings for the pipeline canvas core.

Automatically reads from environment variables (or a .env file) through
pydantic-settings. Every variable is prefixed with PIPELINE_CANVAS_.

Environment variables:
  PIPELINE_CANVAS_LOG_LEVEL               - Python log level (default: WARNING)
  PIPELINE_CANVAS_CANVAS_PATH             - path of the canvas editor route
                                            (default: /pipelines/canvas)
  PIPELINE_CANVAS_LAYOUT                  - "vertical" | "horizontal" placement
                                            of expanded template nodes
  PIPELINE_CANVAS_NODE_ID_PREFIX          - prefix for generated node ids
                                            (default: "node-")
  PIPELINE_CANVAS_UNMAPPED_STEP_FALLBACK  - "sentinel" | "deployment_type";
                                            what an unknown step kind maps to
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LayoutName = Literal["vertical", "horizontal"]
UnmappedFallback = Literal["sentinel", "deployment_type"]


class CanvasSettings(BaseSettings):
    """Process-wide knobs for URL building, layout and node id generation.

    No explicit from_env() call needed - just instantiate: CanvasSettings()
    """

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_CANVAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"
    canvas_path: str = "/pipelines/canvas"
    layout: LayoutName = "vertical"
    node_id_prefix: str = Field(default="node-", min_length=1)
    unmapped_step_fallback: UnmappedFallback = "sentinel"

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: object) -> str:
        return str(v).upper()

    @field_validator("layout", "unmapped_step_fallback", mode="before")
    @classmethod
    def lowercase_choice(cls, v: object) -> str:
        return str(v).lower()

    @field_validator("canvas_path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        """Always absolute, never a trailing slash (except the root itself)."""
        return "/" + v.strip().strip("/")

    @classmethod
    def from_env(cls) -> CanvasSettings:
        return cls()
