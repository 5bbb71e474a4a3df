"""Reporter settings loader."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class MessageFormat(str, Enum):
    """How message content is rendered in reported events."""

    STRING = "string"
    ARRAY = "array"


class ReportTarget(BaseModel):
    """Where and how events are posted."""

    model_config = ConfigDict(frozen=True)

    post_url: Optional[str] = None
    secret: str = ""
    message_format: MessageFormat = MessageFormat.STRING
    timeout_seconds: float = Field(default=30.0, gt=0)
    connect_retries: int = Field(default=3, ge=0)

    @field_validator("post_url", mode="before")
    @classmethod
    def _blank_url_is_absent(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("secret", mode="before")
    @classmethod
    def _none_secret_is_blank(cls, value):
        return "" if value is None else value

    @property
    def enabled(self) -> bool:
        return self.post_url is not None


class HeartbeatConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    interval_millis: int = Field(default=15000, ge=0)

    @property
    def interval_seconds(self) -> float:
        return self.interval_millis / 1000


class ReporterSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    http: ReportTarget = Field(default_factory=ReportTarget)
    heartbeat: HeartbeatConfig = Field(default_factory=HeartbeatConfig)

    @classmethod
    def from_file(cls, path: Path) -> "ReporterSettings":
        data = yaml.safe_load(path.read_text()) or {}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid reporter settings: {exc}") from exc
