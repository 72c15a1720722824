"""Pydantic models for aumai-ggufpull."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Layer",
    "Manifest",
    "ModelRecord",
    "PullResult",
]


class Layer(BaseModel):
    """A single content-addressed layer listed in a registry manifest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    media_type: str = Field(default="", alias="mediaType")
    digest: str = ""       # sha256:<hex>

    @field_validator("media_type", "digest", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Manifest(BaseModel):
    """
    Registry manifest for one model tag.

    Only the ``layers`` array is read; the config descriptor and any other
    keys the registry returns are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    layers: list[Layer] = Field(default_factory=list)

    @field_validator("layers", mode="before")
    @classmethod
    def _null_as_no_layers(cls, value: Any) -> Any:
        # JSON null decodes to an empty array, and a null entry to a blank layer.
        if value is None:
            return []
        if isinstance(value, list):
            return [{} if item is None else item for item in value]
        return value


class ModelRecord(BaseModel):
    """One entry scraped from the model catalog page."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    size_variants: list[str] = Field(default_factory=list)     # e.g. "7b", "70b"
    capability_tags: list[str] = Field(default_factory=list)   # e.g. "tools", "vision"
    pull_count: str = ""
    tag_count: str = ""
    updated_at: str = ""


class PullResult(BaseModel):
    """Outcome of a resolve-then-fetch run."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str
    tag: str
    digest: str
    path: Path
    bytes_written: int
