import pytest

from vidpipe.codec_info import CropRect, ResizeDim, SurfaceFormat
from vidpipe.decoder_geometry import (
    DecodeCaps,
    DecoderGeometry,
    FrameCache,
    UnsupportedStreamError,
    check_decode_caps,
    compute_geometry,
)

FULL_HD = CropRect(0, 0, 1920, 1080)


def _caps(**overrides):
    values = dict(is_supported=True, max_width=4096, max_height=4096, max_mb_count=65536)
    values.update(overrides)
    return DecodeCaps(**values)


def test_caps_accept_stream_within_limits():
    assert check_decode_caps(_caps(), 1920, 1088) is None


def test_caps_reject_unsupported_codec():
    with pytest.raises(UnsupportedStreamError, match="Codec not supported on this GPU"):
        check_decode_caps(_caps(is_supported=False), 640, 480)


def test_caps_reject_too_wide():
    with pytest.raises(UnsupportedStreamError, match="Resolution not supported on this GPU"):
        check_decode_caps(_caps(max_width=1280), 1920, 1080)


def test_caps_reject_too_high():
    with pytest.raises(UnsupportedStreamError, match="Resolution not supported"):
        check_decode_caps(_caps(max_height=720), 1280, 1080)


def test_caps_reject_macroblock_count():
    with pytest.raises(UnsupportedStreamError, match="MBCount not supported on this GPU"):
        check_decode_caps(_caps(max_mb_count=10), 1920, 1080)


def test_unsupported_error_is_runtime_error():
    with pytest.raises(RuntimeError):
        check_decode_caps(_caps(is_supported=False), 16, 16)


def test_geometry_without_crop_or_resize_uses_display_area():
    geo = compute_geometry(1920, 1088, FULL_HD)
    assert (geo.width, geo.luma_height) == (1920, 1080)
    assert (geo.surface_width, geo.surface_height) == (1920, 1088)
    assert geo.display_rect == CropRect()
    assert geo.chroma_height == geo.luma_height // 2
    assert geo.num_chroma_planes == 1
    assert geo.bytes_per_pixel == 1


def test_geometry_with_resize():
    geo = compute_geometry(1920, 1088, FULL_HD, resize=ResizeDim(640, 360))
    assert (geo.width, geo.luma_height) == (640, 360)
    assert (geo.surface_width, geo.surface_height) == (640, 360)
    assert geo.display_rect == FULL_HD


def test_geometry_crop_takes_precedence_over_resize():
    crop = CropRect(100, 50, 740, 530)
    geo = compute_geometry(1920, 1088, FULL_HD, crop=crop, resize=ResizeDim(320, 240))
    assert geo.width == crop.r - crop.l
    assert geo.luma_height == crop.b - crop.t
    assert geo.display_rect == crop
    assert geo.surface_width == geo.width


def test_geometry_inactive_crop_is_ignored():
    with_empty = compute_geometry(1920, 1088, FULL_HD, crop=CropRect(10, 10, 0, 0))
    plain = compute_geometry(1920, 1088, FULL_HD)
    assert with_empty == plain


def test_geometry_yuv444_has_two_full_chroma_planes():
    geo = compute_geometry(1280, 720, CropRect(0, 0, 1280, 720), surface_format=SurfaceFormat.YUV444)
    assert geo.num_chroma_planes == 2
    assert geo.chroma_height == geo.luma_height


def test_geometry_high_bit_depth_uses_two_bytes():
    geo = compute_geometry(1280, 720, CropRect(0, 0, 1280, 720), surface_format=SurfaceFormat.P016, bit_depth_minus8=2)
    assert geo.bytes_per_pixel == 2


def test_bgr_frame_is_twice_nv12_frame():
    geo = compute_geometry(1920, 1088, FULL_HD)
    assert geo.frame_bytes(True) == 2 * geo.frame_bytes(False)


def test_yuv444_frame_matches_bgr_frame():
    geo = compute_geometry(640, 480, CropRect(0, 0, 640, 480), surface_format=SurfaceFormat.YUV444)
    assert geo.frame_bytes(False) == geo.frame_bytes(True)


def test_p016_frame_is_twice_nv12_frame():
    area = CropRect(0, 0, 640, 480)
    nv12 = compute_geometry(640, 480, area)
    p016 = compute_geometry(640, 480, area, surface_format=SurfaceFormat.P016, bit_depth_minus8=2)
    assert p016.frame_bytes(False) == 2 * nv12.frame_bytes(False)


def test_bgr_frame_bytes_pinned():
    geo = compute_geometry(4, 2, CropRect(0, 0, 4, 2))
    assert geo.frame_bytes(True) == 24


def test_frame_bytes_without_width_raises():
    geo = DecoderGeometry(0, 0, 0, 1, 0, 0, CropRect(), 1, SurfaceFormat.NV12)
    with pytest.raises(ValueError):
        geo.frame_bytes(False)


def test_cache_hands_frames_out_in_order():
    cache = FrameCache()
    for n in range(3):
        cache.store(f"frame{n}", n * 40)
    out = [cache.next_frame() for _ in range(3)]
    assert out == [("frame0", 0, 0), ("frame1", 40, 1), ("frame2", 80, 2)]
    assert cache.next_frame() is None
    assert cache.num_decoded == 0


def test_cache_empty_returns_none():
    assert FrameCache().next_frame() is None


def test_cache_limited_overwrites_last_slot():
    cache = FrameCache(max_cache=2)
    slots = [cache.store(name, ts) for name, ts in (("a", 1), ("b", 2), ("c", 3))]
    assert slots == [0, 1, 1]
    assert cache.capacity == 2
    assert cache.num_decoded == 2
    assert cache.next_frame() == ("a", 1, 0)
    assert cache.next_frame() == ("c", 3, 1)
    assert cache.next_frame() is None


def test_cache_reset_keeps_slots_and_index():
    cache = FrameCache()
    cache.store("a", 1)
    cache.store("b", 2)
    cache.next_frame()
    cache.reset()
    assert cache.num_decoded == 0
    assert cache.next_frame() is None
    slot = cache.store("c", 3)
    assert slot == 0
    assert cache.capacity == 2
    assert cache.next_frame() == ("c", 3, 1)
    assert cache.frame_index == 2


@pytest.mark.parametrize("bad", [0, -2])
def test_cache_rejects_bad_limit(bad):
    with pytest.raises(ValueError):
        FrameCache(max_cache=bad)