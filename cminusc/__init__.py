"""Syntax trees, symbol tables, semantic analysis and intermediate code for C-minus."""

__version__ = "0.1.0"