# vidpipe

Pure-Python helpers for a video analytics pipeline. The package covers the
bookkeeping and format logic around decoding and annotating video. It needs no
dependencies outside the standard library.

## Modules

- **`vidpipe.position`** places text labels next to boxes. A label stays on
  the canvas and overlaps the labels already placed as little as possible.
  It provides `PositionManager` with `select_optimal_position`,
  `find_candidate_positions` and `clear_marked_positions`. It also provides
  the box measures `intersection_area`, `iou` and `overlap`. Boxes are
  `(left, top, right, bottom)` tuples.
- **`vidpipe.codec_info`** holds the decoder codec, surface and chroma enums
  (`VideoCodec`, `SurfaceFormat`, `ChromaFormat`) and the `CropRect` and
  `ResizeDim` dataclasses. Its functions are:
  - `ffmpeg_to_nv_codec` maps FFmpeg codec ids to decoder codecs. Unknown ids
    give `VideoCodec.NUM_CODECS`.
  - `select_output_format` picks the output surface format and falls back
    through the formats the decoder's mask allows. It raises `ValueError`
    when the mask allows none of them.
  - `chroma_height_factor` and `chroma_plane_count` describe a surface
    format's chroma planes.
  - `grid_dims` and `block_dims` give launch sizes, with at most 512 threads
    per block.
- **`vidpipe.decoder_geometry`** contains:
  - `check_decode_caps`, which raises `UnsupportedStreamError` when a
    `DecodeCaps` cannot handle a stream's codec, resolution or macroblock
    count.
  - `compute_geometry`, which returns a `DecoderGeometry` for crop and resize
    settings. `DecoderGeometry.frame_bytes` gives the size of a packed BGR
    frame or a planar YUV frame.
  - `FrameCache`, which holds decoded frames for one packet and hands them out
    in order. It is unbounded when `max_cache` is -1. Otherwise, once it is
    full, further frames overwrite its last slot.
- **`vidpipe.demux_info`** contains:
  - `pixel_layout`, which gives the bit depth and plane sizes of each
    `PixelFormat`. Unknown formats are treated as 8-bit 4:2:0 and a warning is
    logged.
  - `open_options`, which gives the options for opening a URI. RTSP URIs get
    TCP transport, a buffer size and timeouts.
  - `needs_annexb_filter`, which names the H.264 or HEVC Annex B bitstream
    filter for MP4-like containers. `needs_extradata_prefix` says whether an
    MPEG-4 stream's first packet must be prefixed with the codec extradata.
  - `scale_pts`, which converts a timestamp to the target ticks per second,
    and `rational_to_float`, which turns a fraction into a float.
  - `prepend_extradata`, which joins extradata with a packet in place of the
    packet's 3-byte start code.
- **`vidpipe.nalu`** scans H.264 Annex B byte streams for 4-byte start codes.
  - `find_nalu` finds the next start code. `find_all_nalu_info` lists every
    NAL unit as a `NalUnitInfo`.
  - `NalUnitHeader.from_byte` splits a header byte into its fields.
  - `slice_type_from_header` decodes a slice type from the first byte of a
    slice header.
  - `nal_unit_type_string`, `nal_unit_type_short_string`, `slice_type_string`,
    `format_nalu_frame_type` and `format_nalu_type` name unit types and slice
    types and summarise a list of units.

## Install

```
pip install .
```

## Examples

Label placement:

```python
from vidpipe.position import PositionManager

pm = PositionManager(lambda text: (len(text) * 10, 12, 4))
x, y = pm.select_optimal_position((50.0, 50.0, 150.0, 150.0), 640, 480, "person 0.92")
```

Summarising an H.264 packet:

```python
from vidpipe.nalu import find_all_nalu_info, format_nalu_frame_type

data = bytes([0, 0, 0, 1, 0x67, 0x42, 0, 0, 0, 1, 0x65, 0xB8])
infos = find_all_nalu_info(data, len(data), 0)
print(format_nalu_frame_type(infos))   # "sps,I"
```

Decoder output geometry:

```python
from vidpipe.codec_info import CropRect, ffmpeg_to_nv_codec
from vidpipe.decoder_geometry import compute_geometry

ffmpeg_to_nv_codec(27)                       # VideoCodec.H264
geometry = compute_geometry(1920, 1088, CropRect(0, 0, 1920, 1080))
geometry.frame_bytes(output_bgr=True)        # 6220800
geometry.frame_bytes(output_bgr=False)       # 3110400 (NV12)
```

Demux details:

```python
from vidpipe.demux_info import open_options, pixel_layout, scale_pts

pixel_layout("yuv420p10le", 1080)            # bit_depth=10, chroma_height=540, bytes_per_pixel=2
open_options("rtsp://localhost/stream")      # {"rtsp_transport": "tcp", ...}
scale_pts(10, 0.5)                           # 5000 (milliseconds)
```

## What it does not do

The package reads no files or network streams. It decodes no video and draws
nothing on images. It has no command-line program. It gives the formats,
sizes, timestamps and byte-stream structure that such a pipeline works with,
and your own media and drawing code uses them.

## Tests

```
pip install .[test]
pytest
```