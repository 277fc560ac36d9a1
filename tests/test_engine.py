from concurrent.futures import ThreadPoolExecutor

from pdfscan.config import AnalyzerConfig
from pdfscan.detectors import STREAM_CONTENT_FINDING
from pdfscan.document import Document, PdfBoolean, PdfNumber
from pdfscan.engine import analyze_document
from pdfscan.models import JavaScriptObject, ObjectStatistics

from builders import array, dictionary, document, flate_stream, name, ref, stream, string


def sample_document():
    return document({
        1: dictionary(Type=name("Catalog"), OpenAction=ref(4), Pages=ref(2)),
        2: dictionary(Type=name("Pages"), Kids=array(ref(3)), Count=PdfNumber(1)),
        3: dictionary(Type=name("Page"), Parent=ref(2)),
        4: dictionary(Type=name("Action"), S=name("JavaScript"), JS=ref(5)),
        5: flate_stream(b"app.alert('x'); eval(unescape(p))", JS=PdfBoolean(True)),
        6: stream(b"%PDF-embedded", Type=name("EmbeddedFile")),
        7: string("powershell -enc AAAA"),
    }, info=dictionary(Producer=string("Evil Corp Generator")))


def test_empty_document_is_benign():
    result = analyze_document(Document())
    assert result.object_statistics == ObjectStatistics()
    assert result.severity_score == 0
    assert result.severity == "Low"
    assert result.verdict == "Likely benign"


def test_script_action_and_auto_action_score_medium():
    doc = document({
        1: dictionary(S=name("JavaScript")),
        2: dictionary(OpenAction=ref(1)),
    })
    result = analyze_document(doc)
    assert result.has_javascript
    assert result.has_auto_action
    assert result.severity_score == 5
    assert result.severity == "Medium"
    assert result.verdict == "Potentially malicious"


def test_script_key_also_counts_as_script_object():
    doc = document({
        1: dictionary(JS=string("app.alert(1)")),
        2: dictionary(OpenAction=ref(1)),
    })
    result = analyze_document(doc)
    assert result.object_statistics.js_objects == 1
    assert result.severity_score == 3 + 2 + 2


def test_extracts_flate_script_and_skips_unsupported_filter():
    doc = document({
        3: flate_stream(b"alert('x')", JS=PdfBoolean(True)),
        4: stream(b"616c657274282978", Filter=name("ASCIIHexDecode"), JavaScript=PdfBoolean(True)),
    })
    result = analyze_document(doc)
    assert result.javascript_objects == [JavaScriptObject(id=3, content="alert('x')")]
    assert result.has_javascript
    assert [failure.id for failure in result.decode_errors] == [4]


def test_unsupported_filter_alone_still_reports_javascript():
    doc = document({1: stream(b"alert(1)", Filter=name("LZWDecode"), JS=PdfBoolean(True))})
    result = analyze_document(doc)
    assert result.has_javascript
    assert result.javascript_objects == []


def test_large_file_contributes_exactly_one_point():
    threshold = AnalyzerConfig().file_size_threshold
    over = analyze_document(Document(size=threshold + 1))
    under = analyze_document(Document(size=threshold - 1))
    assert over.large_file_size
    assert not under.large_file_size
    assert over.severity_score - under.severity_score == 1


def test_unusual_types_listed_once():
    doc = document({
        1: dictionary(Type=name("Font")),
        2: dictionary(Type=name("EmbeddedFile")),
    })
    result = analyze_document(doc)
    assert result.unusual_objects == ["EmbeddedFile"]


def test_stream_findings_follow_name_findings():
    doc = document({
        1: flate_stream(b"eval(x)"),
        2: name("ShellExecute"),
    })
    result = analyze_document(doc)
    assert result.suspicious_names == ["ShellExecute", STREAM_CONTENT_FINDING]


def test_full_sample_document():
    result = analyze_document(sample_document())

    assert result.has_javascript
    assert result.has_auto_action
    assert not result.has_obj_stm
    assert result.suspicious_names == ["powershell -enc AAAA", STREAM_CONTENT_FINDING]
    assert not result.hidden_content
    assert not result.large_file_size
    assert result.suspicious_metadata
    assert result.unusual_objects == ["Action", "EmbeddedFile"]
    assert result.object_statistics == ObjectStatistics(
        total_objects=8, stream_objects=2, js_objects=2, obj_stm_objects=0,
    )
    assert result.javascript_objects == [JavaScriptObject(id=5, content="app.alert('x'); eval(unescape(p))")]
    # 3 + 2 + 2 names + 2 metadata + 2 types + 2 * 2 script objects
    assert result.severity_score == 15
    assert result.severity == "Critical"


def test_repeated_runs_are_identical():
    doc = sample_document()
    assert analyze_document(doc) == analyze_document(doc)


def test_parallel_run_matches_sequential():
    doc = sample_document()
    with ThreadPoolExecutor(max_workers=4) as pool:
        parallel = analyze_document(doc, executor=pool)
    assert parallel == analyze_document(doc)


def test_duplicate_decode_failures_are_reported_once():
    doc = document({1: stream(b"broken", Filter=name("FlateDecode"), JS=PdfBoolean(True))})
    result = analyze_document(doc)
    assert len(result.decode_errors) == 1
