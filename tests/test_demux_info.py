import pytest

from vidpipe.demux_info import (
    CODEC_ID_H264,
    CODEC_ID_HEVC,
    CODEC_ID_MPEG4,
    PixelFormat,
    PixelLayout,
    needs_annexb_filter,
    needs_extradata_prefix,
    open_options,
    pixel_layout,
    prepend_extradata,
    rational_to_float,
    scale_pts,
)


@pytest.mark.parametrize(
    "fmt", [PixelFormat.YUV420P, PixelFormat.YUVJ420P, PixelFormat.YUVJ422P, PixelFormat.YUVJ444P]
)
def test_eight_bit_420_like_layouts(fmt):
    layout = pixel_layout(fmt, 480)
    assert layout.bit_depth == 8
    assert layout.bytes_per_pixel == 1
    assert layout.chroma_height * 2 == 480


def test_odd_height_rounds_chroma_up():
    layout = pixel_layout(PixelFormat.YUV420P, 481)
    assert layout.chroma_height * 2 == 482


@pytest.mark.parametrize(
    "fmt, depth",
    [(PixelFormat.YUV420P10LE, 10), (PixelFormat.YUV420P12LE, 12)],
)
def test_high_depth_420(fmt, depth):
    layout = pixel_layout(fmt, 720)
    assert layout.bit_depth == depth
    assert layout.bytes_per_pixel == 2
    assert layout.chroma_height * 2 == 720


@pytest.mark.parametrize(
    "fmt, depth, bpp",
    [
        (PixelFormat.YUV444P, 8, 1),
        (PixelFormat.YUV444P10LE, 10, 2),
        (PixelFormat.YUV444P12LE, 12, 2),
    ],
)
def test_444_layouts_double_chroma(fmt, depth, bpp):
    layout = pixel_layout(fmt, 360)
    assert layout.bit_depth == depth
    assert layout.bytes_per_pixel == bpp
    assert layout.chroma_height == 360 * 2


def test_layout_accepts_format_name():
    assert pixel_layout("yuv444p10le", 100) == pixel_layout(PixelFormat.YUV444P10LE, 100)


def test_unknown_format_falls_back_to_420():
    assert pixel_layout("rgb24", 200) == pixel_layout(PixelFormat.YUV420P, 200)


def test_frame_size_counts_all_planes():
    layout = PixelLayout(height=10, bit_depth=10, chroma_height=5, bytes_per_pixel=2)
    assert layout.frame_size(4) == 4 * (10 + 5) * 2


def test_rational_to_float():
    assert rational_to_float(30000, 1001) == pytest.approx(30000 / 1001)
    assert rational_to_float(0, 1) == 0.0
    assert rational_to_float(25, 0) == 0.0


def test_rtsp_options():
    options = open_options("rtsp://localhost/stream")
    assert options == {
        "rtsp_transport": "tcp",
        "buffer_size": "1024000",
        "stimeout": "2000000",
        "max_delay": "1000000",
    }


def test_non_rtsp_has_no_options():
    assert open_options("/videos/clip.mp4") == {}
    assert open_options("http://localhost/rtsp://x") == {}


def test_options_are_independent_copies():
    first = open_options("rtsp://localhost/a")
    first["rtsp_transport"] = "udp"
    assert open_options("rtsp://localhost/a")["rtsp_transport"] == "tcp"


@pytest.mark.parametrize(
    "container", ["QuickTime / MOV", "FLV (Flash Video)", "Matroska / WebM"]
)
def test_annexb_filters_for_mp4_like(container):
    assert needs_annexb_filter(CODEC_ID_H264, container) == "h264_mp4toannexb"
    assert needs_annexb_filter(CODEC_ID_HEVC, container) == "hevc_mp4toannexb"
    assert needs_annexb_filter(CODEC_ID_MPEG4, container) is None
    assert needs_extradata_prefix(CODEC_ID_MPEG4, container) is True


def test_no_filter_for_raw_streams():
    assert needs_annexb_filter(CODEC_ID_H264, "raw H.264 video") is None
    assert needs_extradata_prefix(CODEC_ID_MPEG4, "raw MPEG-4 video") is False
    assert needs_extradata_prefix(CODEC_ID_H264, "QuickTime / MOV") is False


def test_scale_pts_to_milliseconds():
    assert scale_pts(90000, 1 / 90000) == 1000
    assert scale_pts(0, 1 / 90000) == 0


def test_scale_pts_truncates_toward_zero():
    assert scale_pts(1, 0.0015, 1000) == 1
    assert scale_pts(-1, 0.0015, 1000) == -1


def test_prepend_extradata_replaces_start_code():
    extradata = b"\x00\x00\x01\xb0\x01"
    packet = b"\x00\x00\x01\xb6\xaa\xbb"
    joined = prepend_extradata(extradata, packet)
    assert joined == extradata + packet[3:]
    assert len(joined) == len(extradata) + len(packet) - 3


def test_prepend_without_extradata_yields_nothing():
    assert prepend_extradata(b"", b"\x00\x00\x01\xb6") == b""


def test_prepend_rejects_short_packet():
    with pytest.raises(ValueError):
        prepend_extradata(b"\x01", b"\x00\x00")