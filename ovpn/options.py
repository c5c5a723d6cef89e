"""Decoder configuration."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DecoderOptions(BaseModel):
    """Policies applied by the TCP and UDP entry points."""

    model_config = ConfigDict(frozen=True)

    ack_trailing: Literal["error", "ignore"] = Field(
        "error", description="What to do with bytes left after an ack body"
    )
    zero_copy: bool = Field(True, description="Return memoryview slices of the input instead of bytes copies")


DEFAULT_OPTIONS = DecoderOptions()
