from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PanelName = Literal["endpoints", "detail", "request"]
ResponseTabName = Literal["pretty", "raw", "headers"]


class UIConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    # Delay before buffered keystrokes become visible in an editor.
    flush_delay_ms: int = Field(default=16, ge=0, le=1000)
    poll_interval_ms: int = Field(default=50, ge=10, le=1000)
    max_schema_depth: int = Field(default=20, ge=1, le=100)
    default_response_tab: ResponseTabName = "pretty"
    start_panel: PanelName = "endpoints"


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    level: str = "INFO"
    path: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept loguru level names case-insensitively."""
        normalized = v.upper()
        if normalized not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return normalized


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
