"""Build PDF documents for the projects of a multi-module build.

This package exposes the CLI entry points used by the ``reactor-pdf``
console script to render one document per project and locale, and to
aggregate the tables of contents of every module into a top-level document.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from reactor_pdf import main
>>> main(["pdf"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
