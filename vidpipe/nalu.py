"""Inspection of H.264 Annex B byte streams: NAL unit headers and slice types."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

START_CODE = b"\x00\x00\x00\x01"


class NalUnitType(IntEnum):
    """The ``nal_unit_type`` field of a NAL unit header."""

    UNUSE = 0
    SLICE_NONIDR_LAYER_WITHOUT_PARTITIONING_RBSP = 1
    SLICE_DATA_PARTITION_A_LAYER_RBSP = 2
    SLICE_DATA_PARTITION_B_LAYER_RBSP = 3
    SLICE_DATA_PARTITION_C_LAYER_RBSP = 4
    SLICE_IDR_LAYER_WITHOUT_PARTITIONING_RBSP = 5
    SEI_RBSP = 6
    SEQ_PARAMETER_SET_RBSP = 7
    PIC_PARAMETER_SET_RBSP = 8
    ACCESS_UNIT_DELIMITER_RBSP = 9
    END_OF_SEQ_RBSP = 10
    END_OF_STREAM_RBSP = 11
    FILLER_DATA_RBSP = 12
    SEQ_PARAMETER_SET_EXTENSION_RBSP = 13
    RESERVE = 14
    SLICE_LAYER_WITHOUT_PARTITIONING_RBSP = 19
    RESERVE2 = 20
    UNUSE2 = 24


class SliceType(IntEnum):
    """The ``slice_type`` of a slice header; values 5-9 are the "all slices" variants."""

    UNKNOW = 0xFF
    P = 0
    B = 1
    I = 2  # noqa: E741
    SP = 3
    SI = 4
    EX_P = 5
    EX_B = 6
    EX_I = 7
    EX_SP = 8
    EX_SI = 9


_SLICE_UNITS = (
    NalUnitType.SLICE_IDR_LAYER_WITHOUT_PARTITIONING_RBSP,
    NalUnitType.SLICE_NONIDR_LAYER_WITHOUT_PARTITIONING_RBSP,
)

_LONG_NAMES = {
    NalUnitType.UNUSE: "unuse",
    NalUnitType.SLICE_NONIDR_LAYER_WITHOUT_PARTITIONING_RBSP: "slice_nonidr_layer_without_partitioning_rbsp",
    NalUnitType.SLICE_DATA_PARTITION_A_LAYER_RBSP: "slice_data_partition_a_layer_rbsp",
    NalUnitType.SLICE_DATA_PARTITION_B_LAYER_RBSP: "slice_data_partition_b_layer_rbsp",
    NalUnitType.SLICE_DATA_PARTITION_C_LAYER_RBSP: "slice_data_partition_c_layer_rbsp",
    NalUnitType.SLICE_IDR_LAYER_WITHOUT_PARTITIONING_RBSP: "slice_idr_layer_without_partitioning_rbsp",
    NalUnitType.SEI_RBSP: "sei_rbsp",
    NalUnitType.SEQ_PARAMETER_SET_RBSP: "seq_parameter_set_rbsp",
    NalUnitType.PIC_PARAMETER_SET_RBSP: "pic_parameter_set_rbsp",
    NalUnitType.ACCESS_UNIT_DELIMITER_RBSP: "access_unit_delimiter_rbsp",
    NalUnitType.END_OF_SEQ_RBSP: "end_of_seq_rbsp",
    NalUnitType.END_OF_STREAM_RBSP: "end_of_stream_rbsp",
    NalUnitType.FILLER_DATA_RBSP: "filler_data_rbsp",
    NalUnitType.SEQ_PARAMETER_SET_EXTENSION_RBSP: "seq_parameter_set_extension_rbsp",
    NalUnitType.RESERVE: "reserve",
    NalUnitType.SLICE_LAYER_WITHOUT_PARTITIONING_RBSP: "slice_layer_without_partitioning_rbsp",
    NalUnitType.RESERVE2: "reserve2",
    NalUnitType.UNUSE2: "unuse2",
}

_SHORT_NAMES = {
    NalUnitType.UNUSE: "unuse",
    NalUnitType.SLICE_NONIDR_LAYER_WITHOUT_PARTITIONING_RBSP: "nonidr",
    NalUnitType.SLICE_DATA_PARTITION_A_LAYER_RBSP: "slice_a",
    NalUnitType.SLICE_DATA_PARTITION_B_LAYER_RBSP: "slice_b",
    NalUnitType.SLICE_DATA_PARTITION_C_LAYER_RBSP: "slice_c",
    NalUnitType.SLICE_IDR_LAYER_WITHOUT_PARTITIONING_RBSP: "idr",
    NalUnitType.SEI_RBSP: "sei",
    NalUnitType.SEQ_PARAMETER_SET_RBSP: "sps",
    NalUnitType.PIC_PARAMETER_SET_RBSP: "pps",
    NalUnitType.ACCESS_UNIT_DELIMITER_RBSP: "aud",
    NalUnitType.END_OF_SEQ_RBSP: "eos",
    NalUnitType.END_OF_STREAM_RBSP: "eostr",
    NalUnitType.FILLER_DATA_RBSP: "filter",
    NalUnitType.SEQ_PARAMETER_SET_EXTENSION_RBSP: "sps_ext",
    NalUnitType.RESERVE: "reserve",
    NalUnitType.SLICE_LAYER_WITHOUT_PARTITIONING_RBSP: "slice",
    NalUnitType.RESERVE2: "reserve2",
    NalUnitType.UNUSE2: "unuse2",
}

_SLICE_NAMES = {
    SliceType.P: "P",
    SliceType.EX_P: "P",
    SliceType.B: "B",
    SliceType.EX_B: "B",
    SliceType.I: "I",
    SliceType.EX_I: "I",
    SliceType.SP: "SP",
    SliceType.EX_SP: "SP",
    SliceType.SI: "SI",
    SliceType.EX_SI: "SI",
    SliceType.UNKNOW: "UNKNOW",
}


@dataclass(frozen=True)
class NalUnitHeader:
    """The one-byte header that follows a start code."""

    nal_unit_type: int
    nal_ref_idc: int
    forbidden_zero_bit: int

    @classmethod
    def from_byte(cls, value: int) -> NalUnitHeader:
        """Split a header byte into its fields."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"header byte out of range: {value}")
        return cls(
            nal_unit_type=value & 0x1F,
            nal_ref_idc=(value >> 5) & 0x03,
            forbidden_zero_bit=(value >> 7) & 0x01,
        )


@dataclass(frozen=True)
class NalUnitInfo:
    """A NAL unit located in a byte stream."""

    head: NalUnitHeader
    slice_type: SliceType
    offset: int
    flag_size: int


def _known_unit_type(unit_type: int) -> NalUnitType | None:
    try:
        return NalUnitType(unit_type)
    except ValueError:
        return None


def nal_unit_type_string(unit_type: int) -> str:
    """Full name of a NAL unit type, or ``"unknow"``."""
    known = _known_unit_type(unit_type)
    return _LONG_NAMES[known] if known is not None else "unknow"


def nal_unit_type_short_string(unit_type: int) -> str:
    """Abbreviated name of a NAL unit type, or ``"unknow"``."""
    known = _known_unit_type(unit_type)
    return _SHORT_NAMES[known] if known is not None else "unknow"


def slice_type_string(slice_type: int) -> str:
    """Frame letter(s) of a slice type, or ``"UNKNOW"``."""
    try:
        return _SLICE_NAMES[SliceType(slice_type)]
    except ValueError:
        return "UNKNOW"


def _bits(value: int):
    for shift in range(7, -1, -1):
        yield (value >> shift) & 0x01


def slice_type_from_header(header: int) -> SliceType:
    """Decode ``slice_type`` from the first byte of a slice header.

    The byte holds two Exp-Golomb codes, ``first_mb_in_slice`` then
    ``slice_type``; the second is returned, folded from 5-9 onto 0-4.
    Returns ``UNKNOW`` when the byte does not hold both codes.
    """
    reading = False
    leading_zero_bits = 0
    exponent = 0
    read_bits = 0
    code_index = 0

    for bit in _bits(header & 0xFF):
        complete = False
        if not reading:
            if bit == 0:
                leading_zero_bits += 1
            else:
                exponent = leading_zero_bits
                if leading_zero_bits == 0:
                    complete = True
                else:
                    reading = True
        else:
            read_bits = (read_bits << 1) | bit
            leading_zero_bits -= 1
            if leading_zero_bits == 0:
                reading = False
                complete = True

        if complete:
            code_number = (1 << exponent) - 1 + read_bits
            if code_index == 1:
                if code_number >= 5:
                    code_number -= 5
                try:
                    return SliceType(code_number)
                except ValueError:
                    return SliceType.UNKNOW
            leading_zero_bits = 0
            read_bits = 0
            code_index += 1
    return SliceType.UNKNOW


def find_nalu(data: bytes, end: int, start: int = 0) -> tuple[int, int]:
    """Find the next 4-byte start code in ``data[start:end]``.

    Returns ``(offset, 4)``, or ``(0, 0)`` when there is none.
    """
    if start < 0 or end < 0:
        raise ValueError("start and end must not be negative")
    position = bytes(data).find(START_CODE, start, end)
    if position < 0:
        return 0, 0
    return position, len(START_CODE)


def find_all_nalu_info(data: bytes, end: int, start: int = 0) -> list[NalUnitInfo]:
    """List every NAL unit whose start code lies in ``data[start:end]``."""
    data = bytes(data)
    output: list[NalUnitInfo] = []
    cursor = start
    while True:
        position, flag_size = find_nalu(data, end, cursor)
        if flag_size == 0:
            break
        header_at = position + flag_size
        if header_at >= len(data):
            break
        head = NalUnitHeader.from_byte(data[header_at])
        slice_type = SliceType.UNKNOW
        if head.nal_unit_type in _SLICE_UNITS and header_at + 1 < len(data):
            slice_type = slice_type_from_header(data[header_at + 1])
        output.append(NalUnitInfo(head, slice_type, position, flag_size))
        cursor = header_at + 1
        if cursor >= end:
            break
    return output


def format_nalu_frame_type(infos: Sequence[NalUnitInfo]) -> str:
    """Comma-separated frame letters for slices and short names for other units."""
    return ",".join(
        slice_type_string(info.slice_type)
        if info.head.nal_unit_type in _SLICE_UNITS
        else nal_unit_type_short_string(info.head.nal_unit_type)
        for info in infos
    )


def format_nalu_type(infos: Sequence[NalUnitInfo]) -> str:
    """Comma-separated short names of the units' types."""
    return ",".join(nal_unit_type_short_string(info.head.nal_unit_type) for info in infos)