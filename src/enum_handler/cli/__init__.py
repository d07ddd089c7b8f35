"""
CLI layer for enum-handler.

A Typer application for looking at enum definitions from the terminal:
what a model defines, how labels translate, and how a ``?`` fragment is
rewritten. All logic lives in the library; this package handles only
argument parsing and coloured output.

Entry point::

    enum-handler --help
"""

from enum_handler.cli.app import app

__all__ = ["app"]
