"""Configuration models describing datadrop settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DataDropBaseModel(BaseModel):
    """Shared configuration for datadrop Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class ParseOptions(DataDropBaseModel):
    """Options controlling a single parse call.

    Attributes:
        hash_algorithm: Name of the hashlib algorithm used for fingerprints.
        temp_dir: Directory for the materialized file; the platform temp
            directory when unset.
        assume_base64_data: Treat input without a ``data:`` prefix as a raw
            base64 payload instead of a file path.
        delete_original_file: Remove the source file after reading a path
            input, whether or not the read succeeded.
        self_destruct: Flag copied into the result telling the caller it owns
            deletion of the materialized file.
    """

    hash_algorithm: str = "sha256"
    temp_dir: Optional[str] = None
    assume_base64_data: bool = False
    delete_original_file: bool = False
    self_destruct: bool = True


class LoggingSettings(DataDropBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level used by the CLI.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(DataDropBaseModel):
    """CLI behavior defaults.

    Attributes:
        json_default: Whether commands emit JSON unless told otherwise.
        quiet_default: Whether commands suppress non-error output by default.
    """

    json_default: bool = False
    quiet_default: bool = False


class DataDropConfig(DataDropBaseModel):
    """Top-level configuration struct for datadrop.

    Attributes:
        parsing: Defaults applied to parse calls made through the CLI.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    parsing: ParseOptions = Field(default_factory=ParseOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DataDropBaseModel",
    "ParseOptions",
    "LoggingSettings",
    "CLIOptions",
    "DataDropConfig",
]
