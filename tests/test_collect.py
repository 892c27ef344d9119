from __future__ import annotations

import logging
from pathlib import Path

import pytest

from prokpan.exceptions import MissingAnnotationsError
from prokpan.pipeline.collect import collect_annotations


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("##gff-version 3\n", encoding="utf-8")
    return path


def test_collect_annotations_walks_every_sample(tmp_path: Path) -> None:
    b = _touch(tmp_path / "S2" / "S2.gff")
    a = _touch(tmp_path / "S1" / "S1.gff")
    nested = _touch(tmp_path / "S3" / "extra" / "S3.gff")
    _touch(tmp_path / "S1" / "S1.gbk")
    _touch(tmp_path / "reference.gff3")

    assert collect_annotations(tmp_path) == [a, b, nested]


def test_collect_annotations_fails_when_nothing_found(tmp_path: Path) -> None:
    _touch(tmp_path / "S1" / "S1.faa")

    with pytest.raises(MissingAnnotationsError) as excinfo:
        collect_annotations(tmp_path)

    assert excinfo.value.exit_code == 3


def test_collect_annotations_fails_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(MissingAnnotationsError):
        collect_annotations(tmp_path / "missing")


def test_collect_annotations_logs_count(tmp_path: Path, caplog) -> None:
    _touch(tmp_path / "S1" / "S1.gff")
    logger = logging.getLogger("prokpan.test.collect")

    with caplog.at_level(logging.INFO, logger="prokpan.test.collect"):
        collect_annotations(tmp_path, logger=logger)

    assert "Found 1 GFF files" in caplog.text
