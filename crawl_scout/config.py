"""
Loading and validation of the CrawlScout configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ("CrawlConfig", "ImageMode", "load_config", "DEFAULT_SEED_URL")

DEFAULT_SEED_URL = "https://rarehistoricalphotos.com"

ImageMode = Literal["batch", "inline", "off"]


class CrawlConfig(BaseModel):
    """Configuration of a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(DEFAULT_SEED_URL, description="Starting page of the crawl.")
    max_depth: int = Field(3, ge=0, description="Recursion bound; depth <= 1 spawns no children.")
    timeout: float = Field(20.0, gt=0, description="Global deadline of the collection loop (seconds).")
    request_timeout: float = Field(10.0, gt=0, description="Timeout of a single HTTP request (seconds).")
    output_dir: Path = Field(Path("images"), description="Directory the images are written to.")
    follow_external: bool = Field(True, description="Follow links pointing to other hosts.")
    user_agent: str = Field("CrawlScout/1.0", min_length=1, description="User-Agent header.")
    max_concurrency: Optional[int] = Field(
        None, ge=1, description="Cap on simultaneous page fetches; unbounded when omitted."
    )
    image_mode: ImageMode = Field("batch", description="batch, inline or off.")
    image_concurrency: int = Field(8, ge=1, description="Simultaneous image downloads.")

    @field_validator("seed_url", mode="before")
    def _check_seed_url(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        v = v.strip()
        try:
            parts = urlsplit(v)
        except ValueError as exc:
            raise ValueError(f"invalid seed URL {v!r}: {exc}") from exc
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"invalid seed URL {v!r}: expected an absolute http(s) URL")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read YAML or JSON and return a validated CrawlConfig.

    With *path* = None the file ``configs/default.yaml`` is used when it
    exists, built-in defaults otherwise. An explicit path that does not
    exist raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlConfig(**data)
