"""Parser for ScriptyScript.

The grammar below is handed to Lark, which builds an LALR(1) parser with a
contextual lexer. The contextual lexer only tries the terminals the parser can
accept in its current state, which is how a leading sign becomes part of a
numeric literal where an operand is expected (`x = -1;`) but stays a binary
operator after an operand (`n-1`).

The resulting parse tree is transformed into an abstract syntax tree (AST)
using `ASTTransformer`. Lark errors are translated into `ParseError` so that
callers only ever see this package's exception types.

The `parse_program` function is the public entry point and returns a
`Program` AST node representing the entire source text.
"""

from __future__ import annotations

import re
from typing import Any, List, Tuple

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Program, Literal, Ident, UnaryOp, BinaryOp, Assign, FuncDef, Call,
    Block, ElseIf, IfStmt, WhileStmt, ForStmt, LoopStmt, BreakStmt,
    ContinueStmt, ReturnStmt, ExprStmt
)
from .errors import ParseError
from .types import NIL, INT_MIN, INT_MAX


RESERVED_WORDS = (
    'if', 'else', 'while', 'for', 'break', 'continue', 'return', 'fn', 'class',
    'and', 'or', 'not',
    # literal and statement words of the grammar
    'loop', 'true', 'false', 'nil',
)


SCRIPTY_GRAMMAR = r"""
    start: statement*

    // Statements
    ?statement: assign_stmt
              | return_stmt
              | break_stmt
              | continue_stmt
              | if_stmt
              | while_stmt
              | loop_stmt
              | for_stmt
              | expr_stmt

    assign_stmt: assignment ";"
    assignment: IDENT "=" expression
    return_stmt: "return" [expression] ";"
    break_stmt: "break" ";"
    continue_stmt: "continue" ";"
    if_stmt: "if" expression block elseif_clause* [else_clause]
    elseif_clause: "else" "if" expression block
    else_clause: "else" block
    while_stmt: "while" expression block
    loop_stmt: "loop" block
    for_stmt: "for" "(" [assignment] ";" [expression] ";" [assignment] ")" block
    expr_stmt: expression ";"

    block: "{" statement* "}"

    // Expressions, lowest precedence first
    ?expression: logical
    ?logical: equality ((AND | OR) equality)*
    ?equality: relational ((EQ | NE) relational)*
    ?relational: additive ((LE | GE | LT | GT) additive)*
    ?additive: multiplicative ((PLUS | MINUS) multiplicative)*
    ?multiplicative: unary ((STAR | SLASH | PERCENT) unary)*
    ?unary: (MINUS | NOT) unary
          | primary
    ?primary: NUMBER -> number
            | STRING -> string
            | "true" -> true
            | "false" -> false
            | "nil" -> nil
            | function_call
            | function_def
            | IDENT -> identifier
            | "(" expression ")"

    function_call: IDENT "(" [arguments] ")"
    arguments: expression ("," expression)*
    function_def: "fn" "(" [parameters] ")" block
    parameters: IDENT ("," IDENT)*

    // Tokens
    AND: "and"
    OR: "or"
    NOT: "not"
    EQ: "=="
    NE: "!="
    LE: "<="
    GE: ">="
    LT: "<"
    GT: ">"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    PERCENT: "%"

    IDENT: /(?!(?:@RESERVED@)(?![A-Za-z0-9_]))[A-Za-z_][A-Za-z0-9_]*/

    // scientific, float, binary, hex, decimal: the first alternative that matches wins
    NUMBER: /[+-]?(?:[0-9]+(?:\.[0-9]+)?[eE][0-9]+|[0-9]+\.[0-9]+|0b[01]+|0x[0-9a-fA-F]+|[0-9]+)/

    STRING: /"(?:[^"\\]|\\["\\nrt]|\\u[0-9a-fA-F]{4})*"/

    // Whitespace and comments
    WS: /[ \t\r\n]+/
    %ignore WS
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
""".replace('@RESERVED@', '|'.join(RESERVED_WORDS))


SCRIPTY_PARSER = Lark(
    SCRIPTY_GRAMMAR,
    parser='lalr',
    lexer='contextual',
    propagate_positions=True,
    maybe_placeholders=True,
)


_ESCAPES = {'"': '"', '\\': '\\', 'n': '\n', 'r': '\r', 't': '\t'}
_ESCAPE_RE = re.compile(r'\\(u[0-9a-fA-F]{4}|["\\nrt])')


def unescape_string(raw: str) -> str:
    """Strip the quotes from a string token and process its escape sequences.

    Raises ValueError for `\\u` escapes naming a surrogate code point.
    """
    def replace(match):
        escape = match.group(1)
        if escape[0] == 'u':
            code = int(escape[1:], 16)
            if 0xD800 <= code <= 0xDFFF:
                raise ValueError(f"\\{escape} is a surrogate, not a Unicode scalar value")
            return chr(code)
        return _ESCAPES[escape]
    return _ESCAPE_RE.sub(replace, raw[1:-1])


def parse_number_literal(token: Token) -> Tuple[Any, str]:
    """Convert a NUMBER token into its value and literal type.

    Raises ValueError for Integer literals outside the signed 64-bit range.
    """
    text = str(token)
    sign = -1 if text.startswith('-') else 1
    digits = text.lstrip('+-')
    if digits.startswith('0b'):
        value = sign * int(digits[2:], 2)
    elif digits.startswith('0x'):
        value = sign * int(digits[2:], 16)
    elif '.' in digits or 'e' in digits or 'E' in digits:
        return float(text), 'Float'
    else:
        value = sign * int(digits, 10)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"integer literal {text} out of range")
    return value, 'Integer'


class ASTTransformer(Transformer):
    """Transforms the Lark parse tree into an AST."""

    def __init__(self, source: str = ''):
        super().__init__()
        self.source = source

    def token_error(self, token: Token, message: str) -> ParseError:
        return ParseError(message, token.line, token.column,
                          byte_offset(self.source, token.start_pos), [])

    def start(self, items):
        return Program(body=list(items))

    def block(self, items):
        return Block(statements=list(items))

    # Statements
    def assign_stmt(self, items):
        return items[0]

    def assignment(self, items):
        return Assign(name=str(items[0]), value=items[1])

    def expr_stmt(self, items):
        return ExprStmt(items[0])

    def return_stmt(self, items):
        return ReturnStmt(items[0])

    def break_stmt(self, items):
        return BreakStmt()

    def continue_stmt(self, items):
        return ContinueStmt()

    def if_stmt(self, items):
        # items: condition, block, elseif clauses..., else block or None
        condition = items[0]
        then_block = items[1]
        elseif_clauses: List[ElseIf] = list(items[2:-1])
        else_block = items[-1]
        return IfStmt(condition, then_block, elseif_clauses, else_block)

    def elseif_clause(self, items):
        return ElseIf(items[0], items[1])

    def else_clause(self, items):
        return items[0]

    def while_stmt(self, items):
        return WhileStmt(items[0], items[1])

    def loop_stmt(self, items):
        return LoopStmt(items[0])

    def for_stmt(self, items):
        init, condition, post, body = items
        return ForStmt(init, condition, post, body)

    # Expressions
    def _binary(self, items):
        # items pattern: expr (op expr)*, folded left-associatively
        left = items[0]
        i = 1
        while i < len(items):
            op = items[i]
            right = items[i + 1]
            left = BinaryOp(op=str(op), left=left, right=right)
            i += 2
        return left

    logical = _binary
    equality = _binary
    relational = _binary
    additive = _binary
    multiplicative = _binary

    def unary(self, items):
        op_token, operand = items
        op = 'neg' if op_token.type == 'MINUS' else 'not'
        return UnaryOp(op=op, operand=operand)

    def number(self, items):
        try:
            value, literal_type = parse_number_literal(items[0])
        except ValueError as e:
            raise self.token_error(items[0], str(e)) from None
        return Literal(value, literal_type)

    def string(self, items):
        try:
            text = unescape_string(str(items[0]))
        except ValueError as e:
            raise self.token_error(items[0], str(e)) from None
        return Literal(text, 'String')

    def true(self, items):
        return Literal(True, 'Bool')

    def false(self, items):
        return Literal(False, 'Bool')

    def nil(self, items):
        return Literal(NIL, 'Nil')

    def identifier(self, items):
        return Ident(str(items[0]))

    def function_call(self, items):
        name, args = items
        return Call(func=Ident(str(name)), args=args or [])

    def arguments(self, items):
        return list(items)

    def function_def(self, items):
        params, body = items
        return FuncDef(params=params or [], body=body)

    def parameters(self, items):
        return [str(item) for item in items]


def byte_offset(source: str, pos: int) -> int:
    """Convert a character offset into `source` to a UTF-8 byte offset."""
    return len(source[:pos].encode('utf-8'))


def _end_position(source: str) -> Tuple[int, int]:
    line = source.count('\n') + 1
    column = len(source) - (source.rfind('\n') + 1) + 1
    return line, column


def translate_error(err: UnexpectedInput, source: str) -> ParseError:
    """Build a ParseError from a Lark exception."""
    expected = getattr(err, 'expected', None) or getattr(err, 'allowed', None) or ()
    expected = sorted(name for name in expected if not name.startswith('$'))
    if isinstance(err, UnexpectedToken) and err.token.type != '$END':
        message = f"unexpected {err.token.type} {str(err.token)!r}"
        line, column, pos = err.line, err.column, err.pos_in_stream
    elif isinstance(err, UnexpectedCharacters):
        message = f"unexpected character {source[err.pos_in_stream]!r}"
        line, column, pos = err.line, err.column, err.pos_in_stream
    else:
        message = "unexpected end of input"
        line, column = _end_position(source)
        pos = len(source)
    if expected:
        message += f", expected one of: {', '.join(expected)}"
    return ParseError(message, line, column, byte_offset(source, pos or 0), expected)


def parse_program(source: str) -> Program:
    """Parse ScriptyScript source code into an AST Program.

    Either the whole source parses or a ParseError is raised; nothing is
    evaluated before parsing has finished.
    """
    try:
        tree = SCRIPTY_PARSER.parse(source)
    except UnexpectedInput as e:
        raise translate_error(e, source) from None
    try:
        return ASTTransformer(source).transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        raise
