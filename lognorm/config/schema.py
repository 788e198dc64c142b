from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return value


class ScannerConfig(BaseModel):
    pool_size: int = Field(16, ge=0)


class IngestConfig(BaseModel):
    log_types: List[str] = Field(default_factory=list)
    max_errors: int = Field(0, ge=0)


class LogNormConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    ingest: IngestConfig = Field(default_factory=IngestConfig)
