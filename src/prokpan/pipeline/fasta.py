from __future__ import annotations

import gzip
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator

CONTIG_PREFIX = b"contig_"


def _open_binary(path: Path) -> BinaryIO:
    if path.suffix == ".gz":
        return gzip.open(path, "rb")  # type: ignore[return-value]
    return path.open("rb")


def rename_contig_lines(lines: Iterable[bytes]) -> Iterator[bytes]:
    """Replace every FASTA header with ``>contig_<N>``, counting from 1.

    Lines are handled as raw bytes, so header content in any encoding is
    accepted. Sequence lines pass through untouched and each header keeps its
    original line terminator.
    """

    count = 0
    for line in lines:
        if line.startswith(b">"):
            count += 1
            terminator = line[len(line.rstrip(b"\r\n")):]
            yield b">" + CONTIG_PREFIX + str(count).encode("ascii") + terminator
        else:
            yield line


def rename_contigs(source: Path, destination: Path) -> int:
    """Write a copy of ``source`` with canonical contig headers to ``destination``.

    Any previous ``destination`` is overwritten. Returns the number of contigs.
    """

    if source.resolve() == destination.resolve():
        raise ValueError(f"Refusing to rename contigs in place: {source}")

    destination.parent.mkdir(parents=True, exist_ok=True)
    contigs = 0
    with _open_binary(source) as reader, destination.open("wb") as writer:
        for line in rename_contig_lines(reader):
            if line.startswith(b">"):
                contigs += 1
            writer.write(line)

    return contigs
