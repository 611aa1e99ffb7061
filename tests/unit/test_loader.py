
import pytest
from pathlib import Path
from origintrace.host.loader import (
    ParallelProgress,
    discover_source_files,
    load_file_worker,
    parallel_load_files,
)
from origintrace.parsers.treesitter_parser import ThreadLocalParserFactory

def test_parallel_progress_increment():
    progress = ParallelProgress(total=10)
    assert progress.completed == 0
    assert progress.errors == 0

    assert progress.increment_completed() == 1
    assert progress.completed == 1

    assert progress.increment_errors() == 1
    assert progress.errors == 1

def test_parallel_load_files_empty_list():
    parsed, errors = parallel_load_files([])
    assert parsed == []
    assert errors == 0

def test_parallel_load_files_preserves_order(tmp_path):
    files = []
    for name in ["c.ts", "a.ts", "b.js"]:
        f = tmp_path / name
        f.write_text("export const X = 1;")
        files.append(f)

    parsed, errors = parallel_load_files(files, max_workers=3)

    assert errors == 0
    assert [p.filepath for p in parsed] == [str(f) for f in files]

def test_load_file_worker_success(tmp_path):
    f = tmp_path / "a.ts"
    f.write_text("export const Foo = 1;")

    result = load_file_worker(f, ThreadLocalParserFactory())

    assert result.success
    assert result.filepath == str(f)
    assert result.parsed.language == "typescript"

def test_load_file_worker_error(tmp_path):
    # A directory cannot be read as a source file
    d = tmp_path / "subdir.ts"
    d.mkdir()

    result = load_file_worker(d, ThreadLocalParserFactory())

    assert not result.success
    assert result.parsed is None
    assert result.error is not None

def test_parallel_load_files_with_error(tmp_path):
    d = tmp_path / "subdir.ts"
    d.mkdir()
    parsed, errors = parallel_load_files([d])
    assert errors == 1
    assert parsed == []

def test_progress_callback_events(tmp_path):
    good = tmp_path / "a.ts"
    good.write_text("export const Foo = 1;")
    bad = tmp_path / "bad.ts"
    bad.mkdir()
    events = []

    parallel_load_files([good, bad], max_workers=1,
                        progress_callback=lambda event, data: events.append((event, data)))

    kinds = sorted(event for event, _ in events)
    assert kinds == ["file_loaded", "load_error"]
    loaded = next(data for event, data in events if event == "file_loaded")
    assert loaded["path"] == str(good)
    assert loaded["total"] == 2

def test_failing_progress_callback_is_ignored(tmp_path):
    f = tmp_path / "a.ts"
    f.write_text("export const Foo = 1;")

    def callback(event, data):
        raise RuntimeError("callback failed")

    parsed, errors = parallel_load_files([f], progress_callback=callback)

    assert len(parsed) == 1
    assert errors == 0

def test_discover_source_files(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.ts").write_text("")
    (tmp_path / "src" / "b.tsx").write_text("")
    (tmp_path / "src" / "notes.md").write_text("")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("")
    (tmp_path / ".cache").mkdir()
    (tmp_path / ".cache" / "c.ts").write_text("")
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "a.js").write_text("")

    found = discover_source_files(tmp_path)

    assert found == [tmp_path / "src" / "a.ts", tmp_path / "src" / "b.tsx"]

def test_discover_source_files_requires_directory(tmp_path):
    f = tmp_path / "a.ts"
    f.write_text("")
    with pytest.raises(NotADirectoryError):
        discover_source_files(f)
