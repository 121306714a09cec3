import json
import os
import stat
import threading

import pytest

from portfolio_data.normalize import build_from_directory
from portfolio_data.writer import DocumentWriteError, dump_document, write_document, write_documents


def test_dump_document_is_indented_and_keeps_unicode():
    text = dump_document({"title": "Café", "items": [1]})

    assert text == '{\n  "title": "Café",\n  "items": [\n    1\n  ]\n}\n'


def test_write_document_creates_directory_and_replaces(tmp_path):
    target = tmp_path / "nested" / "out" / "projects.json"

    write_document(target, [{"id": "old"}])
    write_document(target, [{"id": "new"}])

    assert json.loads(target.read_text(encoding="utf-8")) == [{"id": "new"}]
    assert list(target.parent.iterdir()) == [target]


def test_write_document_failure_leaves_no_temp_files(tmp_path):
    # A directory squatting on the target name makes the final rename fail.
    target = tmp_path / "projects.json"
    target.mkdir()
    (target / "keep.txt").write_text("x", encoding="utf-8")

    with pytest.raises(DocumentWriteError) as excinfo:
        write_document(target, [])

    assert excinfo.value.path == target
    assert "projects.json" in str(excinfo.value)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["projects.json"]
    assert (target / "keep.txt").read_text(encoding="utf-8") == "x"


def test_unserializable_document_never_touches_previous_output(tmp_path):
    target = tmp_path / "resume.json"
    write_document(target, {"header": {"name": "Ada"}})

    with pytest.raises(TypeError):
        write_document(target, {"bad": object()})

    assert json.loads(target.read_text(encoding="utf-8")) == {"header": {"name": "Ada"}}
    assert [p.name for p in tmp_path.iterdir()] == ["resume.json"]


def test_concurrent_writers_always_leave_a_complete_document(tmp_path):
    target = tmp_path / "projects.json"
    errors = []

    def writer(n):
        payload = {"writer": n, "items": list(range(2000))}
        try:
            for _ in range(10):
                write_document(target, payload)
        except Exception as exc:  # surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["writer"] in range(8)
    assert data["items"] == list(range(2000))
    assert [p.name for p in tmp_path.iterdir()] == ["projects.json"]


def test_write_documents_uses_default_and_custom_names(tmp_path):
    documents = {"projects": [], "focus_areas": [], "resume": {"header": {}}, "case_studies": []}

    written = write_documents(documents, tmp_path / "out", names={"resume": "cv.json"})

    assert [p.name for p in written] == ["projects.json", "focus-areas.json", "cv.json", "case-studies.json"]
    assert all(p.exists() for p in written)


def test_rebuilding_unchanged_tables_is_byte_identical(content_dir, tmp_path):
    first, _ = build_from_directory(content_dir)
    second, _ = build_from_directory(content_dir)

    out_a = write_documents(first.to_documents(), tmp_path / "a")
    out_b = write_documents(second.to_documents(), tmp_path / "b")

    for a, b in zip(out_a, out_b):
        assert a.name == b.name
        assert a.read_bytes() == b.read_bytes()


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_new_document_gets_umask_default_mode(tmp_path, umask_022):
    target = write_document(tmp_path / "projects.json", [])

    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_replaced_document_keeps_existing_mode(tmp_path, umask_022):
    target = tmp_path / "resume.json"
    target.write_text("{}", encoding="utf-8")
    target.chmod(0o640)

    write_document(target, {"header": {}})

    assert stat.S_IMODE(target.stat().st_mode) == 0o640
    assert json.loads(target.read_text(encoding="utf-8")) == {"header": {}}
