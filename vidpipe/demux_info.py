"""Container-level helpers for demuxing: pixel layouts, open options, timestamps and packet fix-ups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

_log = logging.getLogger(__name__)

CODEC_ID_MPEG4 = 12
CODEC_ID_H264 = 27
CODEC_ID_HEVC = 173

DEFAULT_TIME_SCALE = 1000

_MP4_LIKE_CONTAINERS = frozenset(
    {"QuickTime / MOV", "FLV (Flash Video)", "Matroska / WebM"}
)

_ANNEXB_FILTERS = {
    CODEC_ID_H264: "h264_mp4toannexb",
    CODEC_ID_HEVC: "hevc_mp4toannexb",
}

_START_CODE_LENGTH = 3

_RTSP_OPTIONS = {
    "rtsp_transport": "tcp",
    "buffer_size": "1024000",
    "stimeout": "2000000",
    "max_delay": "1000000",
}


class PixelFormat(Enum):
    """Pixel formats of a demuxed video stream that have a known layout."""

    YUV420P = "yuv420p"
    YUVJ420P = "yuvj420p"
    YUVJ422P = "yuvj422p"
    YUVJ444P = "yuvj444p"
    YUV444P = "yuv444p"
    YUV420P10LE = "yuv420p10le"
    YUV420P12LE = "yuv420p12le"
    YUV444P10LE = "yuv444p10le"
    YUV444P12LE = "yuv444p12le"


@dataclass(frozen=True)
class PixelLayout:
    """Bit depth and plane sizes of a planar picture of a given height."""

    height: int
    bit_depth: int
    chroma_height: int
    bytes_per_pixel: int

    def frame_size(self, width: int) -> int:
        """Bytes needed for one picture of ``width`` pixels."""
        return width * (self.height + self.chroma_height) * self.bytes_per_pixel


def _as_pixel_format(pixel_format: PixelFormat | str) -> PixelFormat | None:
    if isinstance(pixel_format, PixelFormat):
        return pixel_format
    try:
        return PixelFormat(pixel_format)
    except ValueError:
        return None


def pixel_layout(pixel_format: PixelFormat | str, height: int) -> PixelLayout:
    """Return the layout for ``pixel_format``; unknown formats are treated as 8-bit 4:2:0."""
    fmt = _as_pixel_format(pixel_format)
    half = (height + 1) >> 1
    double = height << 1
    if fmt is PixelFormat.YUV420P10LE:
        return PixelLayout(height, 10, half, 2)
    if fmt is PixelFormat.YUV420P12LE:
        return PixelLayout(height, 12, half, 2)
    if fmt is PixelFormat.YUV444P10LE:
        return PixelLayout(height, 10, double, 2)
    if fmt is PixelFormat.YUV444P12LE:
        return PixelLayout(height, 12, double, 2)
    if fmt is PixelFormat.YUV444P:
        return PixelLayout(height, 8, double, 1)
    if fmt in (
        PixelFormat.YUV420P,
        PixelFormat.YUVJ420P,
        PixelFormat.YUVJ422P,
        PixelFormat.YUVJ444P,
    ):
        # JPEG 4:2:2 and 4:4:4 are subsampled to 4:2:0 by the decoder.
        return PixelLayout(height, 8, half, 1)
    _log.warning("ChromaFormat not recognized. Assuming 420")
    return PixelLayout(height, 8, half, 1)


def rational_to_float(num: int, den: int) -> float:
    """Value of ``num / den``, or 0.0 when either part is zero."""
    if num == 0 or den == 0:
        return 0.0
    return num / den


def open_options(uri: str) -> dict[str, str]:
    """Options passed when opening ``uri``; RTSP sources get TCP transport and timeouts."""
    if uri.startswith("rtsp://"):
        return dict(_RTSP_OPTIONS)
    return {}


def _mp4_like(format_long_name: str) -> bool:
    return format_long_name in _MP4_LIKE_CONTAINERS


def needs_annexb_filter(codec_id: int, format_long_name: str) -> str | None:
    """Name of the bitstream filter that converts packets to Annex B, or None if none is needed."""
    if not _mp4_like(format_long_name):
        return None
    return _ANNEXB_FILTERS.get(codec_id)


def needs_extradata_prefix(codec_id: int, format_long_name: str) -> bool:
    """Whether the first packet of the stream must be prefixed with the codec extradata."""
    return codec_id == CODEC_ID_MPEG4 and _mp4_like(format_long_name)


def scale_pts(pts: int, time_base: float, time_scale: int = DEFAULT_TIME_SCALE) -> int:
    """Convert a stream timestamp to ``time_scale`` ticks per second, truncating toward zero."""
    return int(pts * time_scale * time_base)


def prepend_extradata(extradata: bytes, packet: bytes) -> bytes:
    """Join codec extradata with a first packet whose 3-byte start code it replaces.

    Without extradata nothing is produced for the packet and ``b""`` is returned.
    Raises ValueError when the packet is shorter than a start code.
    """
    if not extradata:
        return b""
    if len(packet) < _START_CODE_LENGTH:
        raise ValueError("packet is shorter than a start code")
    return bytes(extradata) + bytes(packet[_START_CODE_LENGTH:])