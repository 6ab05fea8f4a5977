"""Helpers for video pipelines: label placement, codec formats, decoder geometry, demux details and NAL units."""

__version__ = "0.1.0"

__all__ = [
    "codec_info",
    "decoder_geometry",
    "demux_info",
    "nalu",
    "position",
]