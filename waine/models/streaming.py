"""
Streaming frame schemas.

Frame kinds of the line-oriented chat stream and the normalised chunk
shape produced by the generative model boundary.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel

from waine.models.grounding import GroundingMetadata


class FrameType(str, Enum):
    """Line prefixes of the chat stream."""

    TEXT = "0"
    DATA = "2"


class StreamFrame(BaseModel):
    """
    One decoded stream line.

    Attributes:
        frame_type: Text or data frame
        payload: Decoded string for text frames, list of objects for data frames
    """

    frame_type: FrameType
    payload: Any


class ModelStreamChunk(BaseModel):
    """
    One item of the generative model stream.

    Attributes:
        text: Text fragment, if the chunk carried any
        grounding_metadata: Web grounding metadata, if the chunk carried any
    """

    text: str | None = None
    grounding_metadata: GroundingMetadata | None = None
