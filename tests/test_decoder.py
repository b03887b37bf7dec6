import struct

import pytest

from qoicodec import (
    InvalidFormat,
    InvalidGeometry,
    InvalidTrailer,
    Op,
    QOIDecoder,
    QOIError,
    TrailingData,
    UnexpectedEndOfStream,
    decode,
    decode_header_only,
    hash_pixel,
)
from qoicodec.qoi import QOI_END_MARKER


def qoi_stream(width, height, chunks, channels=4, colorspace=0, end=QOI_END_MARKER):
    header = b"qoif" + struct.pack(">IIBB", width, height, channels, colorspace)
    return header + bytes(chunks) + end


def pixels(grid):
    return [grid.pixel_at(x, y) for y in range(grid.height) for x in range(grid.width)]


def test_index_of_untouched_slot_is_transparent_black():
    grid = decode(qoi_stream(1, 1, [Op.INDEX | 10]))

    assert pixels(grid) == [(0, 0, 0, 0)]


def test_index_returns_cached_pixel():
    px = (1, 2, 3, 200)
    grid = decode(qoi_stream(2, 1, [Op.RGBA, *px, Op.INDEX | hash_pixel(px)]))

    assert pixels(grid) == [px, px]


def test_run_of_start_pixel():
    grid = decode(qoi_stream(3, 1, [Op.RUN | 2]))

    assert pixels(grid) == [(0, 0, 0, 255)] * 3


def test_run_stores_pixel_in_cache():
    seed = (0, 0, 0, 255)
    grid = decode(qoi_stream(2, 1, [Op.RUN | 0, Op.INDEX | hash_pixel(seed)]))

    assert pixels(grid) == [seed, seed]


def test_run_spans_rows():
    grid = decode(qoi_stream(2, 2, [Op.RGB, 7, 8, 9, Op.RUN | 2]))

    assert pixels(grid) == [(7, 8, 9, 255)] * 4


def test_rgb_keeps_alpha():
    grid = decode(qoi_stream(2, 1, [Op.RGBA, 1, 2, 3, 100, Op.RGB, 4, 5, 6]))

    assert pixels(grid) == [(1, 2, 3, 100), (4, 5, 6, 100)]


def test_diff_wraps_around():
    grid = decode(qoi_stream(2, 1, [Op.DIFF | (1 << 4) | (1 << 2) | 1, 0b01111111]))

    assert pixels(grid) == [(255, 255, 255, 255), (0, 0, 0, 255)]


def test_luma():
    grid = decode(qoi_stream(2, 1, [Op.RGBA, 127, 30, 0, 200, Op.LUMA | 2, (11 << 4) | 7]))

    assert pixels(grid) == [(127, 30, 0, 200), (100, 0, 225, 200)]


def test_literal_tags_are_not_runs():
    # 0xFD is the longest run, 0xFE and 0xFF are literals
    grid = decode(qoi_stream(64, 1, [Op.RUN | 61, Op.RGB, 1, 2, 3, Op.RGBA, 4, 5, 6, 7]))

    assert pixels(grid) == [(0, 0, 0, 255)] * 62 + [(1, 2, 3, 255), (4, 5, 6, 7)]


def test_accepts_three_channel_linear_header():
    grid = decode(qoi_stream(1, 1, [Op.RGB, 9, 9, 9], channels=3, colorspace=1))

    assert pixels(grid) == [(9, 9, 9, 255)]


@pytest.mark.parametrize(
    "stream, error",
    [
        (qoi_stream(0, 1, []), InvalidGeometry),
        (qoi_stream(1, 0, [], channels=3, colorspace=1), InvalidGeometry),
        (qoi_stream(20000, 20001, []), InvalidGeometry),
        (qoi_stream(1, 1, [], channels=0, colorspace=1), InvalidFormat),
        (qoi_stream(1, 1, [], channels=5, colorspace=1), InvalidFormat),
        (qoi_stream(1, 1, [], colorspace=2), InvalidFormat),
        (b"qoix" + qoi_stream(1, 1, [Op.RGB, 1, 2, 3])[4:], InvalidFormat),
        (b"", UnexpectedEndOfStream),
        (b"qoif\x00\x00", UnexpectedEndOfStream),
    ],
)
def test_invalid_header(stream, error):
    with pytest.raises(error):
        decode(stream)


def test_not_enough_chunks_for_image():
    with pytest.raises(UnexpectedEndOfStream):
        decode(qoi_stream(1, 5, [Op.RGB, 255, 255, 255], end=b""))


@pytest.mark.parametrize(
    "chunks",
    [[Op.RGB, 1, 2], [Op.RGBA, 1, 2, 3], [Op.LUMA | 2]],
)
def test_truncated_chunk(chunks):
    with pytest.raises(UnexpectedEndOfStream):
        decode(qoi_stream(1, 1, chunks, end=b""))


def test_missing_end_marker():
    with pytest.raises(UnexpectedEndOfStream):
        decode(qoi_stream(1, 1, [Op.RGB, 255, 255, 255], end=b""))


def test_short_end_marker():
    with pytest.raises(UnexpectedEndOfStream):
        decode(qoi_stream(1, 1, [Op.RGB, 255, 255, 255], end=QOI_END_MARKER[:7]))


def test_invalid_end_marker():
    with pytest.raises(InvalidTrailer):
        decode(qoi_stream(1, 1, [Op.RGB, 255, 255, 255], end=bytes([0, 0, 0, 0, 0, 0, 0, 4])))


def test_trailing_byte_after_end_marker():
    with pytest.raises(TrailingData):
        decode(qoi_stream(1, 1, [Op.RGB, 255, 255, 255], end=QOI_END_MARKER + b"\xff"))


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        decode(qoi_stream(1, 1, [], colorspace=9))
    with pytest.raises(EOFError):
        decode(qoi_stream(1, 1, [], end=b""))
    assert issubclass(TrailingData, QOIError)


def test_decode_header_only_ignores_body():
    stream = qoi_stream(640, 480, [0xAA], channels=3, colorspace=1, end=b"")

    assert decode_header_only(stream) == (640, 480)

    header = QOIDecoder.decode_header(stream)
    assert (header.channels, header.colorspace) == (3, 1)
    assert header.pixel_count == 640 * 480


def test_decode_accepts_bytearray_and_memoryview():
    stream = qoi_stream(1, 1, [Op.RGB, 1, 2, 3])

    assert decode(bytearray(stream)) == decode(memoryview(stream))


def test_missing_control_byte_reports_its_offset():
    # header is 14 bytes, the RGB chunk takes 14..17, the next chunk starts at 18
    with pytest.raises(UnexpectedEndOfStream, match="Chunk at byte 18 needs 1 more"):
        decode(qoi_stream(1, 2, [Op.RGB, 255, 255, 255], end=b""))


def test_truncated_chunk_reports_its_start():
    with pytest.raises(UnexpectedEndOfStream, match="Chunk at byte 18 needs 4 more"):
        decode(qoi_stream(1, 2, [Op.RGB, 1, 2, 3, Op.RGBA, 1, 2], end=b""))
