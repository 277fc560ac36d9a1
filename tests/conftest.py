from __future__ import annotations

from pathlib import Path
from typing import Callable
import struct
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, NameObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def plain_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "plain.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "Microsoft Word"})
    with pdf_path.open("wb") as handle:
        writer.write(handle)
    return pdf_path


@pytest.fixture()
def javascript_pdf_factory(tmp_path: Path) -> Callable[[str], tuple[Path, int]]:
    """Write a PDF whose catalog opens a Flate-compressed script stream.

    Returns the path and the object id of the script stream.
    """

    def _create(filename: str = "javascript.pdf") -> tuple[Path, int]:
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)

        script = DecodedStreamObject()
        script.set_data(b"alert('x')")
        encoded = script.flate_encode()
        encoded[NameObject("/JS")] = NameObject("/Script")
        script_ref = writer._add_object(encoded)
        writer._root_object[NameObject("/OpenAction")] = script_ref
        writer.add_metadata({"/Producer": "Adobe Acrobat"})

        pdf_path = tmp_path / filename
        with pdf_path.open("wb") as handle:
            writer.write(handle)
        return pdf_path, script_ref.idnum

    return _create


@pytest.fixture()
def javascript_pdf(javascript_pdf_factory) -> tuple[Path, int]:
    return javascript_pdf_factory()


@pytest.fixture()
def broken_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "broken.pdf"
    pdf_path.write_bytes(b"")
    return pdf_path


def _object_stream_pdf_bytes() -> bytes:
    """A one page PDF 1.5 file whose page tree lives in an object stream.

    pypdf cannot write object streams or cross-reference streams, so the
    file is assembled by hand: objects 1-3 sit in object stream 4, object 5
    is the cross-reference stream and object 6 is the Info dictionary.
    """
    members = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 200 200] >>",
    ]
    pairs = []
    body = b""
    for number, member in enumerate(members, start=1):
        pairs.append(b"%d %d" % (number, len(body)))
        body += member + b"\n"
    index = b" ".join(pairs) + b"\n"
    object_stream = index + body

    out = bytearray(b"%PDF-1.5\n%\xe2\xe3\xcf\xd3\n")
    offsets = {}

    def add(number: int, data: bytes):
        offsets[number] = len(out)
        out.extend(b"%d 0 obj\n" % number + data + b"\nendobj\n")

    add(4, b"<< /Type /ObjStm /N 3 /First %d /Length %d >>\nstream\n" % (len(index), len(object_stream))
        + object_stream + b"\nendstream")
    add(6, b"<< /Producer (Microsoft Word) >>")

    xref_offset = len(out)
    rows = [
        (0, 0, 65535),
        (2, 4, 0),
        (2, 4, 1),
        (2, 4, 2),
        (1, offsets[4], 0),
        (1, xref_offset, 0),
        (1, offsets[6], 0),
    ]
    entries = b"".join(struct.pack(">BIH", *row) for row in rows)
    add(5, b"<< /Type /XRef /Size 7 /W [1 4 2] /Root 1 0 R /Info 6 0 R /Length %d >>\nstream\n" % len(entries)
        + entries + b"\nendstream")
    out.extend(b"startxref\n%d\n%%%%EOF\n" % xref_offset)
    return bytes(out)


@pytest.fixture()
def object_stream_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "object_streams.pdf"
    pdf_path.write_bytes(_object_stream_pdf_bytes())
    return pdf_path
