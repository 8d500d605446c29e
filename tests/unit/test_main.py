import json
import logging

import pytest

from threadstacks.main import main

THREADS = [
    {"id": "root", "title": "Root", "lastUpdatedDate": "2025-01-01T00:00:00Z"},
    {
        "id": "a",
        "lastUpdatedDate": "2025-01-02T00:00:00Z",
        "handoffParentId": "root",
    },
    {
        "id": "b",
        "lastUpdatedDate": "2025-01-03T00:00:00Z",
        "handoffParentId": "root",
    },
    {"id": "solo", "lastUpdatedDate": "2024-12-01T00:00:00Z"},
]


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def threads_file(tmp_path):
    p = tmp_path / "threads.json"
    p.write_text(json.dumps(THREADS), encoding="utf-8")
    return p


def test_build_prints_entries(threads_file, capsys):
    code = main(["--log-level", "ERROR", "build", "--threads", str(threads_file)])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert [e["thread"]["id"] for e in out] == ["root", "solo"]
    assert out[0]["kind"] == "stack"
    assert out[0]["stack"]["topology"]["rootId"] == "root"
    assert [d["id"] for d in out[0]["stack"]["descendants"]] == ["b", "a"]


def test_default_command_is_build(threads_file, monkeypatch, capsys):
    monkeypatch.setenv("THREADS_FILE", str(threads_file))

    assert main(["--log-level", "ERROR"]) == 0
    assert len(json.loads(capsys.readouterr().out)) == 2


def test_build_flatten_with_expand(threads_file, capsys):
    code = main(
        [
            "--log-level",
            "ERROR",
            "build",
            "--threads",
            str(threads_file),
            "--flatten",
            "--expand",
            "root",
        ]
    )

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert [t["id"] for t in out] == ["root", "b", "a", "solo"]


def test_build_writes_output_file(threads_file, tmp_path):
    target = tmp_path / "out" / "entries.json"

    code = main(
        [
            "--log-level",
            "ERROR",
            "build",
            "--threads",
            str(threads_file),
            "--output",
            str(target),
        ]
    )

    assert code == 0
    assert len(json.loads(target.read_text(encoding="utf-8"))) == 2


def test_zero_indent_is_compact_on_stdout_and_in_file(
    threads_file, tmp_path, monkeypatch, capsys
):
    monkeypatch.setenv("OUTPUT_INDENT", "0")
    target = tmp_path / "entries.json"
    base = ["--log-level", "ERROR", "build", "--threads", str(threads_file)]

    assert main(base) == 0
    assert main([*base, "--output", str(target)]) == 0

    printed = capsys.readouterr().out.strip()
    written = target.read_text(encoding="utf-8")
    assert "\n" not in printed
    assert written == printed


def test_chain_command(threads_file, capsys):
    code = main(
        ["--log-level", "ERROR", "chain", "a", "--threads", str(threads_file)]
    )

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["current"]["id"] == "a"
    assert [c["id"] for c in out["ancestors"]] == ["root"]


def test_chain_unknown_thread_fails(threads_file):
    code = main(
        ["--log-level", "CRITICAL", "chain", "zzz", "--threads", str(threads_file)]
    )
    assert code == 1


def test_columns_command(threads_file, tmp_path, capsys):
    meta = tmp_path / "meta.json"
    meta.write_text(json.dumps({"b": {"status": "blocked"}}), encoding="utf-8")

    code = main(
        [
            "--log-level",
            "ERROR",
            "columns",
            "--threads",
            str(threads_file),
            "--metadata",
            str(meta),
        ]
    )

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["blocked"] == [
        {"id": "root", "kind": "stack", "size": 3, "lastActiveId": "b"}
    ]
    assert [e["id"] for e in out["active"]] == ["solo"]


def test_missing_threads_file_fails(tmp_path):
    code = main(
        [
            "--log-level",
            "CRITICAL",
            "build",
            "--threads",
            str(tmp_path / "missing.json"),
        ]
    )
    assert code == 1


def test_invalid_config_fails(monkeypatch, capsys):
    monkeypatch.setenv("LOG_FORMAT", "xml")

    assert main(["build"]) == 1
    assert "Configuration validation error" in capsys.readouterr().err
