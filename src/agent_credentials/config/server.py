"""Server and logging configuration settings."""

from typing import Literal

from pydantic import BaseModel, Field


class ServerSettings(BaseModel):
    """HTTP server and logging configuration."""

    host: str = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8010, ge=1, le=65535, description="Server port")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_json: bool = Field(
        default=False, description="Render logs as JSON instead of console output"
    )
