import pytest

from exifstream.core import read_bytes
from exifstream.exceptions import LoaderStateError, MetadataReadError, NoExifDataError
from exifstream.loader import StreamingLoader, WriteOutcome, WriteResult
from exifstream.tags import FloatTag


def feed(loader: StreamingLoader, data: bytes, size: int) -> int:
    """Write data in chunks until the loader reports the header; return the bytes written."""
    written = 0
    for start in range(0, len(data), size):
        chunk = data[start:start + size]
        result = loader.write(chunk)
        assert result.consumed == len(chunk)
        written += len(chunk)
        if result.outcome is WriteOutcome.HEADER_FOUND:
            break
    return written


def tags_of(store) -> dict:
    return {tag.tag_id: tag for tag in store}


def test_single_chunk(sample_jpeg) -> None:
    loader = StreamingLoader()
    result = loader.write(sample_jpeg)
    assert result == WriteResult(len(sample_jpeg), WriteOutcome.HEADER_FOUND)
    store = loader.finalize()
    assert tags_of(store) == tags_of(read_bytes(sample_jpeg))


@pytest.mark.parametrize("size", [1, 2, 3, 7, 64, 1000])
def test_chunk_boundaries_do_not_matter(sample_jpeg, size) -> None:
    loader = StreamingLoader()
    written = feed(loader, sample_jpeg, size)
    # Writing stops with the chunk that completes the Exif segment
    exif_end = sample_jpeg.index(b"\xff\xdb\x00\x43")
    assert written < exif_end + size
    store = loader.finalize()
    assert tags_of(store) == tags_of(read_bytes(sample_jpeg))
    assert isinstance(store[2], FloatTag)
    assert store[2].float_value() == pytest.approx(10.5, abs=1e-9)


def test_writes_after_header_found_consume_nothing(sample_jpeg) -> None:
    loader = StreamingLoader()
    feed(loader, sample_jpeg, 16)
    assert loader.write(b"\x00\x01") == WriteResult(0, WriteOutcome.HEADER_FOUND)


def test_finalize_without_writes() -> None:
    loader = StreamingLoader()
    with pytest.raises(NoExifDataError):
        loader.finalize()
    with pytest.raises(LoaderStateError):
        loader.finalize()


def test_finalize_is_idempotent_after_success(sample_jpeg) -> None:
    loader = StreamingLoader()
    loader.write(sample_jpeg)
    store = loader.finalize()
    assert loader.finalize() is store


def test_empty_chunk_is_rejected() -> None:
    loader = StreamingLoader()
    with pytest.raises(ValueError):
        loader.write(b"")


def test_write_after_finalize(sample_jpeg) -> None:
    loader = StreamingLoader()
    loader.write(sample_jpeg)
    loader.finalize()
    with pytest.raises(LoaderStateError):
        loader.write(b"\xff")


def test_tiff_stream_accumulates_until_finalize(sample_tiff) -> None:
    loader = StreamingLoader()
    for start in range(0, len(sample_tiff), 5):
        assert loader.write(sample_tiff[start:start + 5]).outcome is WriteOutcome.CONTINUE
    assert tags_of(loader.finalize()) == tags_of(read_bytes(sample_tiff))


def test_png_stream(sample_png) -> None:
    loader = StreamingLoader()
    feed(loader, sample_png, 13)
    assert tags_of(loader.finalize()) == tags_of(read_bytes(sample_png))


def test_exif_header_stream(sample_tiff) -> None:
    loader = StreamingLoader()
    feed(loader, b"Exif\x00\x00" + sample_tiff, 3)
    assert loader.finalize()[0x0112].int_value == 6


def test_jpeg_without_exif_keeps_streaming(jpeg_wrapper) -> None:
    data = b"\xff\xd8\xff\xe0\x00\x04\x00\x00\xff\xda\x00\x04\x00\x00" + bytes(range(256)) * 4
    loader = StreamingLoader()
    for start in range(0, len(data), 100):
        assert loader.write(data[start:start + 100]).outcome is WriteOutcome.CONTINUE
    with pytest.raises(NoExifDataError):
        loader.finalize()


def test_incomplete_exif_segment(sample_jpeg) -> None:
    loader = StreamingLoader()
    cut = sample_jpeg.index(b"Exif\x00\x00") + 20
    assert loader.write(sample_jpeg[:cut]).outcome is WriteOutcome.CONTINUE
    with pytest.raises(NoExifDataError):
        loader.finalize()


def test_unknown_stream() -> None:
    loader = StreamingLoader()
    assert loader.write(b"hello world").outcome is WriteOutcome.CONTINUE
    with pytest.raises(NoExifDataError):
        loader.finalize()


def test_corrupt_exif_block(jpeg_wrapper) -> None:
    loader = StreamingLoader()
    loader.write(jpeg_wrapper(b"XX*\x00\x08\x00\x00\x00"))
    with pytest.raises(MetadataReadError):
        loader.finalize()
    with pytest.raises(LoaderStateError):
        loader.finalize()


def test_context_manager_releases_loader(sample_jpeg) -> None:
    with StreamingLoader() as loader:
        loader.write(sample_jpeg[:100])
    with pytest.raises(LoaderStateError):
        loader.finalize()
    with pytest.raises(LoaderStateError):
        loader.write(sample_jpeg)


@pytest.mark.parametrize("size", [1, 5, 16, 4096])
def test_png_stream_signals_header_before_image_data(sample_tiff, png_wrapper, size) -> None:
    data = png_wrapper(sample_tiff, idat_size=4096)
    loader = StreamingLoader()
    outcomes = []
    written = 0
    for start in range(0, len(data), size):
        result = loader.write(data[start:start + size])
        outcomes.append(result.outcome)
        written += result.consumed
        if result.outcome is WriteOutcome.HEADER_FOUND:
            break

    assert outcomes[-1] is WriteOutcome.HEADER_FOUND
    exif_end = data.index(b"IDAT") - 4
    assert written < exif_end + size
    assert tags_of(loader.finalize()) == tags_of(read_bytes(data))


def test_png_exif_chunk_with_exif_header(sample_tiff, png_wrapper) -> None:
    data = png_wrapper(sample_tiff, idat_size=512, exif_prefix=True)
    loader = StreamingLoader()
    assert feed(loader, data, 64) < len(data)
    assert tags_of(loader.finalize()) == tags_of(read_bytes(sample_tiff))


def test_png_exif_chunk_after_image_data(sample_tiff, png_wrapper) -> None:
    data = png_wrapper(sample_tiff, idat_size=1024, exif_after_idat=True)
    loader = StreamingLoader()
    feed(loader, data, 100)
    assert tags_of(loader.finalize()) == tags_of(read_bytes(sample_tiff))


def test_png_without_exif(png_wrapper) -> None:
    data = png_wrapper(None, idat_size=512)
    loader = StreamingLoader()
    for start in range(0, len(data), 50):
        assert loader.write(data[start:start + 50]).outcome is WriteOutcome.CONTINUE
    with pytest.raises(NoExifDataError):
        loader.finalize()


def test_truncated_segment_fails_like_read_bytes(sample_jpeg, sample_png) -> None:
    for data in (sample_jpeg, sample_png):
        # Cut 40 bytes into the TIFF block
        cut = data[:data.index(b"II*\x00") + 40]
        loader = StreamingLoader()
        loader.write(cut)
        with pytest.raises(NoExifDataError) as streamed:
            loader.finalize()
        with pytest.raises(NoExifDataError) as whole:
            read_bytes(cut)
        assert "incomplete" in str(streamed.value)
        assert str(streamed.value) == str(whole.value)
