"""Codec identifiers, decoder surface formats and launch-size helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

GPU_BLOCK_THREADS = 512


class VideoCodec(IntEnum):
    """Hardware decoder codec identifiers."""

    MPEG1 = 0
    MPEG2 = 1
    MPEG4 = 2
    VC1 = 3
    H264 = 4
    JPEG = 5
    H264_SVC = 6
    H264_MVC = 7
    HEVC = 8
    VP8 = 9
    VP9 = 10
    AV1 = 11
    NUM_CODECS = 12


class SurfaceFormat(IntEnum):
    """Layout of a decoded output surface."""

    NV12 = 0
    P016 = 1
    YUV444 = 2
    YUV444_16BIT = 3


class ChromaFormat(IntEnum):
    """Chroma subsampling of a coded stream."""

    MONOCHROME = 0
    YUV420 = 1
    YUV422 = 2
    YUV444 = 3


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in pixels; inactive unless right and bottom are non-zero."""

    l: int = 0
    t: int = 0
    r: int = 0
    b: int = 0

    @property
    def width(self) -> int:
        return self.r - self.l

    @property
    def height(self) -> int:
        return self.b - self.t

    @property
    def is_active(self) -> bool:
        return bool(self.r and self.b)


@dataclass(frozen=True)
class ResizeDim:
    """Target size of the decoded picture; inactive unless both sides are non-zero."""

    w: int = 0
    h: int = 0

    @property
    def is_active(self) -> bool:
        return bool(self.w and self.h)


_FFMPEG_TO_NV = {
    1: VideoCodec.MPEG1,
    2: VideoCodec.MPEG2,
    12: VideoCodec.MPEG4,
    70: VideoCodec.VC1,
    27: VideoCodec.H264,
    173: VideoCodec.HEVC,
    139: VideoCodec.VP8,
    167: VideoCodec.VP9,
    7: VideoCodec.JPEG,
}

_WIDE_CHROMA = {SurfaceFormat.YUV444, SurfaceFormat.YUV444_16BIT}

_FALLBACK_ORDER = (
    SurfaceFormat.NV12,
    SurfaceFormat.P016,
    SurfaceFormat.YUV444,
    SurfaceFormat.YUV444_16BIT,
)


def ffmpeg_to_nv_codec(ffmpeg_codec_id: int) -> VideoCodec:
    """Map a demuxer codec id to the decoder codec, or ``NUM_CODECS`` if unsupported."""
    return _FFMPEG_TO_NV.get(ffmpeg_codec_id, VideoCodec.NUM_CODECS)


def _is_wide(surface_format: int) -> bool:
    try:
        return SurfaceFormat(surface_format) in _WIDE_CHROMA
    except ValueError:
        return False


def chroma_height_factor(surface_format: int) -> float:
    """Chroma plane height relative to the luma height."""
    return 1.0 if _is_wide(surface_format) else 0.5


def chroma_plane_count(surface_format: int) -> int:
    """Number of chroma planes stored after the luma plane."""
    return 2 if _is_wide(surface_format) else 1


def select_output_format(
    chroma_format: int, bit_depth_minus8: int, output_format_mask: int
) -> SurfaceFormat:
    """Choose the output surface for a stream, falling back to what the decoder offers.

    Raises ValueError when the mask allows none of the known formats.
    """
    high_depth = bool(bit_depth_minus8)
    if chroma_format == ChromaFormat.YUV420:
        preferred = SurfaceFormat.P016 if high_depth else SurfaceFormat.NV12
    elif chroma_format == ChromaFormat.YUV444:
        preferred = SurfaceFormat.YUV444_16BIT if high_depth else SurfaceFormat.YUV444
    else:
        preferred = SurfaceFormat.NV12

    if output_format_mask & (1 << preferred):
        return preferred
    for candidate in _FALLBACK_ORDER:
        if output_format_mask & (1 << candidate):
            return candidate
    raise ValueError("No supported output format found")


def _threads_per_block(num_jobs: int) -> int:
    if num_jobs <= 0:
        raise ValueError("num_jobs must be positive")
    return min(num_jobs, GPU_BLOCK_THREADS)


def grid_dims(num_jobs: int) -> tuple[int, int, int]:
    """Grid size ``(x, y, z)`` that covers ``num_jobs`` threads."""
    threads = _threads_per_block(num_jobs)
    return (num_jobs + threads - 1) // threads, 1, 1


def block_dims(num_jobs: int) -> tuple[int, int, int]:
    """Block size ``(x, y, z)`` for ``num_jobs`` threads."""
    return _threads_per_block(num_jobs), 1, 1