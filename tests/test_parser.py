import pytest

from scripty.ast import (
    Assign, BinaryOp, Block, Call, ExprStmt, ForStmt, FuncDef, Ident, IfStmt,
    Literal, LoopStmt, ReturnStmt, UnaryOp, WhileStmt,
)
from scripty.errors import ParseError
from scripty.parser import parse_program
from scripty.types import NIL


def parse_expr(source):
    program = parse_program(source + ';')
    assert len(program.body) == 1
    stmt = program.body[0]
    assert isinstance(stmt, ExprStmt)
    return stmt.expr


@pytest.mark.parametrize('source, value, literal_type', [
    ('42', 42, 'Integer'),
    ('-17', -17, 'Integer'),
    ('0x1F', 31, 'Integer'),
    ('0b101', 5, 'Integer'),
    ('-0x10', -16, 'Integer'),
    ('3.25', 3.25, 'Float'),
    ('-0.5', -0.5, 'Float'),
    ('1.5e3', 1500.0, 'Float'),
    ('2E2', 200.0, 'Float'),
    ('true', True, 'Bool'),
    ('false', False, 'Bool'),
])
def test_literals(source, value, literal_type):
    expr = parse_expr(source)
    assert expr == Literal(value, literal_type)


def test_nil_literal():
    expr = parse_expr('nil')
    assert expr.literal_type == 'Nil'
    assert expr.value is NIL


@pytest.mark.parametrize('source, text', [
    (r'"plain"', 'plain'),
    (r'"say \"hi\""', 'say "hi"'),
    (r'"back\\slash"', 'back\\slash'),
    (r'"a\nb"', 'a\nb'),
    (r'"a\rb"', 'a\rb'),
    (r'"a\tb"', 'a\tb'),
    (r'"\u0041\u00e9"', 'Aé'),
    ('""', ''),
])
def test_string_escapes(source, text):
    assert parse_expr(source) == Literal(text, 'String')


def test_integer_literal_out_of_range():
    with pytest.raises(ParseError) as info:
        parse_program('x = 1;\ny = 9223372036854775808;')
    assert info.value.line == 2
    assert info.value.column == 5


def test_integer_literal_bounds():
    assert parse_expr('9223372036854775807').value == 2 ** 63 - 1
    assert parse_expr('-9223372036854775808').value == -(2 ** 63)


def test_multiplication_binds_tighter():
    expr = parse_expr('1 + 2 * 3 - 4 / 2')
    assert expr == BinaryOp(
        '-',
        BinaryOp('+', Literal(1, 'Integer'), BinaryOp('*', Literal(2, 'Integer'), Literal(3, 'Integer'))),
        BinaryOp('/', Literal(4, 'Integer'), Literal(2, 'Integer')),
    )


def test_binary_operators_are_left_associative():
    expr = parse_expr('10 - 4 - 3')
    assert expr == BinaryOp('-', BinaryOp('-', Literal(10, 'Integer'), Literal(4, 'Integer')), Literal(3, 'Integer'))


def test_precedence_levels():
    expr = parse_expr('a or b and c == d < e + f * g')
    # and/or share the lowest level and fold left
    assert expr.op == 'and'
    assert expr.left == BinaryOp('or', Ident('a'), Ident('b'))
    equality = expr.right
    assert equality.op == '=='
    relational = equality.right
    assert relational.op == '<'
    assert relational.right == BinaryOp('+', Ident('e'), BinaryOp('*', Ident('f'), Ident('g')))


def test_parentheses_override_precedence():
    expr = parse_expr('(1 + 2) * 3')
    assert expr == BinaryOp('*', BinaryOp('+', Literal(1, 'Integer'), Literal(2, 'Integer')), Literal(3, 'Integer'))


def test_sign_after_operand_is_subtraction():
    assert parse_expr('a -1') == BinaryOp('-', Ident('a'), Literal(1, 'Integer'))
    assert parse_expr('n-1') == BinaryOp('-', Ident('n'), Literal(1, 'Integer'))
    assert parse_expr('2 - -1') == BinaryOp('-', Literal(2, 'Integer'), Literal(-1, 'Integer'))


def test_unary_operators():
    assert parse_expr('- -5') == UnaryOp('neg', Literal(-5, 'Integer'))
    assert parse_expr('-x') == UnaryOp('neg', Ident('x'))
    assert parse_expr('not not x') == UnaryOp('not', UnaryOp('not', Ident('x')))
    assert parse_expr('not a == b') == BinaryOp('==', UnaryOp('not', Ident('a')), Ident('b'))


def test_assignment_and_call():
    program = parse_program('total = add(1, x);\nprint();')
    assign, call = program.body
    assert assign == Assign('total', Call(Ident('add'), [Literal(1, 'Integer'), Ident('x')]))
    assert call == ExprStmt(Call(Ident('print'), []))


def test_function_definition():
    program = parse_program('f = fn(a, b) { return a + b; };\ng = fn() { return; };')
    f, g = program.body
    assert f.value == FuncDef(['a', 'b'], Block([ReturnStmt(BinaryOp('+', Ident('a'), Ident('b')))]))
    assert g.value == FuncDef([], Block([ReturnStmt(None)]))


def test_if_else_if_chain():
    program = parse_program('''
        if x < 0 { sign = -1; }
        else if x == 0 { sign = 0; }
        else if x > 100 { sign = 2; }
        else { sign = 1; }
    ''')
    stmt = program.body[0]
    assert isinstance(stmt, IfStmt)
    assert len(stmt.elseif_clauses) == 2
    assert stmt.elseif_clauses[1].condition == BinaryOp('>', Ident('x'), Literal(100, 'Integer'))
    assert stmt.else_block == Block([Assign('sign', Literal(1, 'Integer'))])


def test_if_without_else():
    stmt = parse_program('if ready { go(); }').body[0]
    assert stmt.elseif_clauses == []
    assert stmt.else_block is None


def test_loops():
    program = parse_program('''
        while i < 3 { i = i + 1; }
        loop { break; }
        for (i = 0; i < 3; i = i + 1) { continue; }
        for (;;) { break; }
    ''')
    while_stmt, loop_stmt, for_stmt, bare_for = program.body
    assert isinstance(while_stmt, WhileStmt)
    assert isinstance(loop_stmt, LoopStmt)
    assert isinstance(for_stmt, ForStmt)
    assert for_stmt.init == Assign('i', Literal(0, 'Integer'))
    assert for_stmt.post == Assign('i', BinaryOp('+', Ident('i'), Literal(1, 'Integer')))
    assert bare_for.init is None and bare_for.condition is None and bare_for.post is None


def test_comments_are_ignored():
    program = parse_program('// line comment\nx = 1; /* block\ncomment */ y = 2;')
    assert [stmt.name for stmt in program.body] == ['x', 'y']


def test_identifiers_may_start_with_reserved_words():
    program = parse_program('iffy = 1; format = 2; nilly = fn_name;')
    assert [stmt.name for stmt in program.body] == ['iffy', 'format', 'nilly']
    assert program.body[2].value == Ident('fn_name')


@pytest.mark.parametrize('source', ['if = 1;', 'while = 2;', 'class = 3;', 'x = return;'])
def test_reserved_words_are_not_identifiers(source):
    with pytest.raises(ParseError):
        parse_program(source)


def test_unterminated_string_reports_line():
    with pytest.raises(ParseError) as info:
        parse_program('x = 1;\ny = 2;\nprint("oops);\n')
    assert info.value.line == 3
    assert str(info.value).startswith('line 3, column')


def test_missing_semicolon():
    with pytest.raises(ParseError) as info:
        parse_program('x = 1\ny = 2;')
    assert info.value.line == 2
    assert 'unexpected' in info.value.message


def test_unexpected_end_of_input():
    source = 'f = fn(a) {\n  return a;\n'
    with pytest.raises(ParseError) as info:
        parse_program(source)
    assert info.value.message.startswith('unexpected end of input')
    assert info.value.line == 3
    assert info.value.pos == len(source)


def test_empty_program():
    assert parse_program('').body == []
    assert parse_program('  // nothing\n').body == []


@pytest.mark.parametrize('escape', ['\\uD800', '\\udbff', '\\uDC00', '\\uDFFF'])
def test_surrogate_escapes_are_rejected(escape):
    with pytest.raises(ParseError) as info:
        parse_program('x = 1;\ny = "a' + escape + '";')
    assert info.value.line == 2
    assert info.value.column == 5
    assert 'surrogate' in info.value.message


def test_escapes_around_the_surrogate_range():
    assert parse_expr(r'"\uD7FF\uE000"').value == '\ud7ff\ue000'


def test_error_position_is_a_byte_offset():
    with pytest.raises(ParseError) as info:
        parse_program('s = "é";\nx = ;')
    assert (info.value.line, info.value.column) == (2, 5)
    assert info.value.pos == 14


def test_literal_error_position_is_a_byte_offset():
    with pytest.raises(ParseError) as info:
        parse_program('x = "é"; y = 9223372036854775808;')
    assert info.value.column == 14
    assert info.value.pos == 14
