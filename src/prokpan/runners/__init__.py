"""External tool runner adapters."""

from prokpan.runners.panaroo import PanarooRunner
from prokpan.runners.prokka import ProkkaRunner

__all__ = [
    "PanarooRunner",
    "ProkkaRunner",
]
