"""Decoder capability checks, output picture geometry and the decoded-frame cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from vidpipe.codec_info import (
    CropRect,
    ResizeDim,
    SurfaceFormat,
    chroma_height_factor,
    chroma_plane_count,
)


class UnsupportedStreamError(RuntimeError):
    """Raised when the decoder cannot handle a stream's codec or size."""


@dataclass(frozen=True)
class DecodeCaps:
    """What the hardware decoder reports it can do for one codec and format."""

    is_supported: bool
    max_width: int
    max_height: int
    max_mb_count: int
    output_format_mask: int = 0


def check_decode_caps(caps: DecodeCaps, coded_width: int, coded_height: int) -> None:
    """Raise UnsupportedStreamError unless ``caps`` allow a stream of this coded size."""
    if not caps.is_supported:
        raise UnsupportedStreamError("Codec not supported on this GPU")
    if coded_width > caps.max_width or coded_height > caps.max_height:
        raise UnsupportedStreamError(
            f"\nResolution          : {coded_width}x{coded_height}"
            f"\nMax Supported (wxh) : {caps.max_width}x{caps.max_height}"
            "\nResolution not supported on this GPU"
        )
    mb_count = (coded_width >> 4) * (coded_height >> 4)
    if mb_count > caps.max_mb_count:
        raise UnsupportedStreamError(
            f"\nMBCount             : {mb_count}"
            f"\nMax Supported mbcnt : {caps.max_mb_count}"
            "\nMBCount not supported on this GPU"
        )


@dataclass(frozen=True)
class DecoderGeometry:
    """Dimensions of the pictures a decoder produces."""

    width: int
    luma_height: int
    chroma_height: int
    num_chroma_planes: int
    surface_width: int
    surface_height: int
    display_rect: CropRect
    bytes_per_pixel: int
    surface_format: SurfaceFormat

    def frame_bytes(self, output_bgr: bool) -> int:
        """Size in bytes of one output frame, packed BGR or planar YUV."""
        if not self.width:
            raise ValueError("decoder geometry has no width")
        if output_bgr:
            return self.width * self.luma_height * 3
        return (
            self.width
            * (self.luma_height + self.chroma_height * self.num_chroma_planes)
            * self.bytes_per_pixel
        )


def compute_geometry(
    coded_width: int,
    coded_height: int,
    display_area: CropRect,
    crop: CropRect | None = None,
    resize: ResizeDim | None = None,
    surface_format: SurfaceFormat = SurfaceFormat.NV12,
    bit_depth_minus8: int = 0,
) -> DecoderGeometry:
    """Work out output size, surface size and display rectangle for a stream.

    Without an active crop or resize the picture keeps the stream's display
    area. A resize scales the display area; a crop, when given, takes
    precedence over the resize for the output size.
    """
    crop = crop or CropRect()
    resize = resize or ResizeDim()

    if not crop.is_active and not resize.is_active:
        width = display_area.r - display_area.l
        luma_height = display_area.b - display_area.t
        surface_width, surface_height = coded_width, coded_height
        display_rect = CropRect()
    else:
        width = luma_height = 0
        display_rect = CropRect()
        if resize.is_active:
            display_rect = display_area
            width, luma_height = resize.w, resize.h
        if crop.is_active:
            display_rect = crop
            width, luma_height = crop.width, crop.height
        surface_width, surface_height = width, luma_height

    return DecoderGeometry(
        width=width,
        luma_height=luma_height,
        chroma_height=int(luma_height * chroma_height_factor(surface_format)),
        num_chroma_planes=chroma_plane_count(surface_format),
        surface_width=surface_width,
        surface_height=surface_height,
        display_rect=display_rect,
        bytes_per_pixel=2 if bit_depth_minus8 > 0 else 1,
        surface_format=SurfaceFormat(surface_format),
    )


@dataclass
class FrameCache:
    """Slots holding frames decoded from one packet, handed out in order.

    ``max_cache`` of -1 means unlimited; otherwise once the cache is full the
    last slot is overwritten by further frames.
    """

    max_cache: int = -1
    _frames: list[Any] = field(default_factory=list, init=False, repr=False)
    _timestamps: list[int] = field(default_factory=list, init=False, repr=False)
    _decoded: int = field(default=0, init=False)
    _returned: int = field(default=0, init=False)
    _frame_index: int = field(default=0, init=False)

    def __init__(self, max_cache: int = -1) -> None:
        if max_cache != -1 and max_cache < 1:
            raise ValueError("max_cache must be -1 or positive")
        self.max_cache = max_cache
        self._frames = []
        self._timestamps = []
        self._decoded = 0
        self._returned = 0
        self._frame_index = 0

    @property
    def num_decoded(self) -> int:
        """Frames stored and not yet handed out."""
        return self._decoded

    @property
    def frame_index(self) -> int:
        """Index the next handed-out frame will carry."""
        return self._frame_index

    @property
    def capacity(self) -> int:
        """Number of slots allocated so far."""
        return len(self._frames)

    def store(self, frame: Any, timestamp: int) -> int:
        """Store a decoded frame and its timestamp; return the slot used."""
        self._decoded += 1
        if self._decoded > len(self._frames):
            if self.max_cache != -1 and len(self._frames) >= self.max_cache:
                self._decoded -= 1
            else:
                self._frames.append(None)
                self._timestamps.append(0)
        slot = self._decoded - 1
        self._frames[slot] = frame
        self._timestamps[slot] = timestamp
        return slot

    def next_frame(self) -> tuple[Any, int, int] | None:
        """Return ``(frame, timestamp, frame_index)`` for the next frame, or None."""
        if self._decoded <= 0:
            return None
        slot = self._returned
        result = (self._frames[slot], self._timestamps[slot], self._frame_index)
        self._decoded -= 1
        self._frame_index += 1
        self._returned += 1
        return result

    def reset(self) -> None:
        """Start a new packet: forget pending frames but keep slots and frame index."""
        self._decoded = 0
        self._returned = 0