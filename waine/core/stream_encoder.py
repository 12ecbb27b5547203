"""
Chat stream framing.

Line-oriented protocol consumed by the chat client:

    0:<JSON string>\\n      text frame, concatenated in order by the client
    2:[<JSON object>]\\n    data frame, out-of-band structured state

Each frame is produced as one complete ``bytes`` line so the transport
never writes half a frame.

Dependencies: json (stdlib), waine.models.streaming
System role: Streaming protocol encoding and decoding
"""

import json
from collections.abc import Iterable
from typing import Any

from waine.models.streaming import FrameType, StreamFrame

_SEPARATORS = (",", ":")


class StreamEncoder:
    """Encodes text and data frames."""

    encoding = "utf-8"

    def text_frame(self, text: str) -> bytes:
        """
        Encode a text frame.

        Args:
            text: Text to append on the client

        Returns:
            bytes: ``0:"..."\\n``
        """
        body = json.dumps(text, ensure_ascii=False)
        return f"{FrameType.TEXT.value}:{body}\n".encode(self.encoding)

    def data_frame(self, payload: dict[str, Any]) -> bytes:
        """
        Encode a data frame carrying a single object.

        Args:
            payload: JSON-serializable object

        Returns:
            bytes: ``2:[{...}]\\n``
        """
        body = json.dumps([payload], ensure_ascii=False, separators=_SEPARATORS)
        return f"{FrameType.DATA.value}:{body}\n".encode(self.encoding)


def decode_frame(line: str | bytes) -> StreamFrame:
    """
    Decode a single frame line.

    Raises:
        ValueError: If the line is not a known frame
    """
    if isinstance(line, bytes):
        line = line.decode(StreamEncoder.encoding)
    line = line.rstrip("\n")
    prefix, sep, body = line.partition(":")
    if not sep:
        raise ValueError(f"Malformed frame: {line[:40]!r}")
    try:
        frame_type = FrameType(prefix)
    except ValueError as e:
        raise ValueError(f"Unknown frame type: {prefix!r}") from e
    return StreamFrame(frame_type=frame_type, payload=json.loads(body))


def decode_stream(data: str | bytes | Iterable[bytes]) -> list[StreamFrame]:
    """
    Decode a whole stream body into frames.

    Args:
        data: Complete body, or an iterable of byte chunks

    Returns:
        list[StreamFrame]: Frames in emission order
    """
    if isinstance(data, (bytes, str)):
        raw = data
    else:
        raw = b"".join(data)
    if isinstance(raw, bytes):
        raw = raw.decode(StreamEncoder.encoding)
    return [decode_frame(line) for line in raw.split("\n") if line]


def collect_text(frames: Iterable[StreamFrame]) -> str:
    """Concatenate the payloads of all text frames."""
    return "".join(frame.payload for frame in frames if frame.frame_type == FrameType.TEXT)
