"""Parsing module for the type definition DSL."""

from typed_records.parsing.type_parser import TypeDecl, TypeParser

__all__ = [
    "TypeDecl",
    "TypeParser",
]
