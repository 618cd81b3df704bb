"""Parser for the type definition DSL.

Example::

    hotel_room {
        rmnum: Int,
        telnum: String,
        beds: Map,
    }
    hotel_room_vip from hotel_room {
        discount_rate: Float [is_discount],
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from typed_records.parsing.type_lexer import TypeLexer
from typed_records.types import FieldDecl


@dataclass
class TypeDecl:
    """A type declaration as written, before any validation."""

    name: str
    fields: list[FieldDecl] = field(default_factory=list)
    parent: str | None = None


class TypeParser:
    """Parser for the type definition DSL."""

    tokens = TypeLexer.tokens

    def __init__(self) -> None:
        self.lexer = TypeLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_schema(self, p: yacc.YaccProduction) -> None:
        """schema : statement_list"""
        p[0] = p[1]

    def p_schema_empty(self, p: yacc.YaccProduction) -> None:
        """schema :"""
        p[0] = []

    def p_statement_list_single(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement"""
        p[0] = [p[1]]

    def p_statement_list_multiple(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement_list statement"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_statement_type(self, p: yacc.YaccProduction) -> None:
        """statement : IDENTIFIER body"""
        p[0] = TypeDecl(name=p[1], fields=p[2])

    def p_statement_derived(self, p: yacc.YaccProduction) -> None:
        """statement : IDENTIFIER FROM IDENTIFIER body"""
        p[0] = TypeDecl(name=p[1], fields=p[4], parent=p[3])

    def p_statement_clone(self, p: yacc.YaccProduction) -> None:
        """statement : IDENTIFIER FROM IDENTIFIER"""
        p[0] = TypeDecl(name=p[1], fields=[], parent=p[3])

    def p_body(self, p: yacc.YaccProduction) -> None:
        """body : LBRACE field_list RBRACE
                | LBRACE field_list COMMA RBRACE"""
        p[0] = p[2]

    def p_body_empty(self, p: yacc.YaccProduction) -> None:
        """body : LBRACE RBRACE"""
        p[0] = []

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list COMMA field"""
        p[0] = p[1] + [p[3]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : IDENTIFIER COLON IDENTIFIER"""
        p[0] = FieldDecl(name=p[1], tag=p[3])

    def p_field_validated(self, p: yacc.YaccProduction) -> None:
        """field : IDENTIFIER COLON IDENTIFIER LBRACKET validator_list RBRACKET"""
        p[0] = FieldDecl(name=p[1], tag=p[3], validators=tuple(p[5]))

    def p_validator_list_single(self, p: yacc.YaccProduction) -> None:
        """validator_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_validator_list_multiple(self, p: yacc.YaccProduction) -> None:
        """validator_list : validator_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> list[TypeDecl]:
        """Parse type definitions and return the declarations in order."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.input(data)
        decls = self.parser.parse(data, lexer=self.lexer.lexer)
        return decls or []
