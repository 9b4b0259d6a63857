"""Archiver configuration model."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

DEFAULT_CDN_PREFIX = "https://cdn.discordapp.com/emojis"

ENV_PREFIX = "EMOJITAR_"
ENV_FIELDS = ("cdn_prefix", "deadline", "order", "on_failure")

OrderMode = Literal["completion", "reference"]
FailurePolicy = Literal["abandon", "raise", "skip"]


class ArchiveLayout(BaseModel):
    """Directory names used inside the archive."""

    root_dir: str = Field(default="emojis")
    images_dir: str = Field(default="images")
    animated_dir: str = Field(default="animated")


class ArchiverConfig(BaseModel):
    """Complete archiver configuration."""

    cdn_prefix: str = Field(default=DEFAULT_CDN_PREFIX, description="URL prefix for emoji files")
    layout: ArchiveLayout = Field(default_factory=ArchiveLayout)
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    deadline: float | None = Field(
        default=None, gt=0, description="Overall build deadline in seconds (None = wait forever)"
    )
    order: OrderMode = Field(default="completion", description="File record ordering")
    on_failure: FailurePolicy = Field(default="abandon", description="What a failed fetch does")
    compression_level: int = Field(default=9, ge=0, le=9)
    read_size: int = Field(default=16384, gt=0, description="Bytes fed to the compressor per push")
    end_of_archive_marker: bool = Field(
        default=False, description="Append two zero blocks after the last entry"
    )
    cache_ttl: int = Field(default=86400, ge=0, description="Payload cache TTL in seconds")
    cache_max_size: int = Field(default=512, ge=0, description="Payload cache entries (0 disables)")

    model_config = {"extra": "forbid"}

    @classmethod
    def from_yaml(cls, path: Path) -> "ArchiverConfig":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    @classmethod
    def load(cls, path: Path | None = None, environ: dict[str, str] | None = None) -> "ArchiverConfig":
        """Load configuration from an optional YAML file plus EMOJITAR_* overrides."""
        data: dict[str, Any] = {}
        if path is not None:
            with open(path) as f:
                data = yaml.safe_load(f) or {}

        env = os.environ if environ is None else environ
        for name in ENV_FIELDS:
            value = env.get(f"{ENV_PREFIX}{name.upper()}")
            if value:
                data[name] = value

        return cls.model_validate(data)
