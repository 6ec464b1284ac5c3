from __future__ import annotations

from pathlib import Path

import pytest

from trace_hintlets.resources import registry


def test_describe_rules_lists_not_gz() -> None:
    rules = registry.describe_rules()
    assert rules[0]["name"] == "Uncompressed Resource"
    assert rules[0]["min_size"] == 150
    assert "text/html" in rules[0]["compressible_types"]
    assert rules[0]["severity"] == "info"


def test_resolve_resource_path_within_base_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(registry.BASE_DIR_ENV, str(tmp_path))
    trace = tmp_path / "page.jsonl"
    trace.write_text("{}\n", encoding="utf-8")

    assert registry._resolve_resource_path("page.jsonl") == trace.resolve()


def test_resolve_resource_path_rejects_escape(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(registry.BASE_DIR_ENV, str(tmp_path / "inner"))
    (tmp_path / "inner").mkdir()
    (tmp_path / "outside.jsonl").write_text("{}\n", encoding="utf-8")

    with pytest.raises(ValueError):
        registry._resolve_resource_path("../outside.jsonl")


def test_resolve_resource_path_rejects_suffix(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(registry.BASE_DIR_ENV, str(tmp_path))
    (tmp_path / "notes.txt").write_text("hi\n", encoding="utf-8")

    with pytest.raises(ValueError):
        registry._resolve_resource_path("notes.txt")
