import pytest

from pdfscan.backends import BACKENDS, PdfplumberBackend, PypdfBackend, get_backend
from pdfscan.backends.base import capture_parser_warnings
from pdfscan.document import PdfName, PdfReference, PdfStream, as_dictionary
from pdfscan.engine import analyze_document
from pdfscan.exceptions import ConfigError, DocumentLoadError
from pdfscan.models import JavaScriptObject


@pytest.fixture(params=sorted(BACKENDS))
def backend(request):
    return get_backend(request.param)


def test_get_backend_by_name():
    assert isinstance(get_backend("pypdf"), PypdfBackend)
    assert isinstance(get_backend("pdfplumber"), PdfplumberBackend)


def test_unknown_backend_is_a_config_error():
    with pytest.raises(ConfigError):
        get_backend("ghostscript")


def test_loads_object_graph(backend, javascript_pdf):
    pdf_path, script_id = javascript_pdf

    loaded = backend.load(str(pdf_path))
    document = loaded.document

    assert document.size == pdf_path.stat().st_size
    assert len(document) > 0

    script = document.get(script_id)
    assert isinstance(script, PdfStream)
    assert script.filter_name == "FlateDecode"
    assert script.dictionary.get(b"JS") == PdfName(b"Script")

    types = {
        as_dictionary(obj).get(b"Type")
        for _, obj in document
        if as_dictionary(obj) is not None
    }
    assert PdfName(b"Catalog") in types
    assert PdfName(b"Page") in types

    assert isinstance(document.trailer.get(b"Root"), PdfReference)
    assert document.info() is not None


def test_loaded_document_analysis(backend, javascript_pdf):
    pdf_path, script_id = javascript_pdf

    result = analyze_document(backend.load(str(pdf_path)).document)

    assert result.has_javascript
    assert result.has_auto_action
    assert result.javascript_objects == [JavaScriptObject(id=script_id, content="alert('x')")]
    assert result.object_statistics.js_objects == 1
    assert result.object_statistics.stream_objects >= 1
    assert not result.suspicious_metadata
    assert result.severity_score >= 7


def test_plain_pdf_has_no_script_indicators(backend, plain_pdf):
    result = analyze_document(backend.load(str(plain_pdf)).document)

    assert not result.has_javascript
    assert not result.has_auto_action
    assert result.javascript_objects == []
    assert result.unusual_objects == []


def test_empty_file_fails_to_load(backend, broken_pdf):
    with pytest.raises(DocumentLoadError):
        backend.load(str(broken_pdf))


def test_missing_file_fails_to_load(backend, tmp_path):
    with pytest.raises(DocumentLoadError, match="not found"):
        backend.load(str(tmp_path / "missing.pdf"))


def test_parser_warnings_are_collected_per_thread():
    import logging

    with capture_parser_warnings("pypdf") as messages:
        logging.getLogger("pypdf._reader").warning("Ignoring wrong pointing object")
    logging.getLogger("pypdf._reader").warning("after the capture")

    assert messages == ["Ignoring wrong pointing object"]


def test_object_stream_containers_are_exposed(backend, object_stream_pdf):
    document = backend.load(str(object_stream_pdf)).document

    assert [object_id for object_id, _ in document] == [1, 2, 3, 4, 5, 6]
    assert document.get(1).get(b"Type") == PdfName(b"Catalog")
    assert document.get(3).get(b"Type") == PdfName(b"Page")
    assert isinstance(document.get(4), PdfStream)
    assert document.get(4).dictionary.get(b"Type") == PdfName(b"ObjStm")


def test_object_stream_pdf_scores_its_containers(backend, object_stream_pdf):
    result = analyze_document(backend.load(str(object_stream_pdf)).document)

    # The container types fall outside the common type list; the marker key is absent
    assert result.unusual_objects == ["ObjStm", "XRef"]
    assert result.has_obj_stm is False
    assert result.object_statistics.obj_stm_objects == 0
    assert not result.suspicious_metadata
    assert not result.has_javascript
    assert result.severity_score == 2
    assert result.severity == "Low"
