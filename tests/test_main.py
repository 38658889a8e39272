import io
import json
import logging
import sys

import pytest

from scripty.__main__ import main, repl
from scripty.interpreter import Interpreter


@pytest.fixture(autouse=True)
def reset_logging():
    # -v attaches a file handler to the package logger; undo it between tests
    yield
    package_logger = logging.getLogger('scripty')
    for handler in list(package_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(logging.NOTSET)


def write(tmp_path, name, source):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write(tmp_path, 'ok.ss', 'x = 2; print("x is", x * 21);')
    main([str(path)])
    assert capsys.readouterr().out == 'x is 42\n'


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / 'absent.ss')])
    assert info.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_parse_error_exits_with_status_one(tmp_path, capsys):
    path = write(tmp_path, 'bad.ss', 'print("start");\nx = ;\n')
    with pytest.raises(SystemExit) as info:
        main([str(path)])
    assert info.value.code == 1
    captured = capsys.readouterr()
    # nothing runs when the program does not parse
    assert captured.out == ''
    assert captured.err.startswith('Parse error: line 2, column 5')


def test_runtime_error_exits_with_status_one(tmp_path, capsys):
    path = write(tmp_path, 'boom.ss', 'print("start"); print(1 / 0);')
    with pytest.raises(SystemExit) as info:
        main([str(path)])
    assert info.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'start\n'
    assert captured.err == 'Runtime error: ZeroDivisionError: division by zero\n'


def test_exit_code_from_script(tmp_path):
    path = write(tmp_path, 'quit.ss', 'exit(4);')
    with pytest.raises(SystemExit) as info:
        main([str(path)])
    assert info.value.code == 4


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write(tmp_path, 'prog.ss', 'f = fn(a) { return a * 2; };\nprint(f(4));\n')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'prog.ss.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert data['type'] == 'Program'
    main(['--ast', str(out_path)])
    assert capsys.readouterr().out == '8\n'


def test_verbose_writes_debug_file(tmp_path):
    path = write(tmp_path, 'v.ss', 'x = 1;')
    debug_file = tmp_path / 'trace.txt'
    main(['-vv', '--debug-file', str(debug_file), str(path)])
    assert 'assign x: Integer = 1' in debug_file.read_text(encoding='utf-8')


def test_repl_shares_scope_and_echoes_values(capsys):
    stdin = io.StringIO('x = 20;\nx + 22;\nprint("hi");\n\nx;\n')
    assert repl(Interpreter(), stdin) == 0
    out = capsys.readouterr().out
    # print returns nil, which is not echoed
    assert out.replace('> ', '').split('\n') == ['42', 'hi', '20', '', '']


def test_repl_reports_errors_and_continues(capsys):
    stdin = io.StringIO('y = ;\nundefined;\n1 + 1;\n')
    assert repl(Interpreter(), stdin) == 0
    captured = capsys.readouterr()
    assert '2\n' in captured.out
    err_lines = captured.err.splitlines()
    assert err_lines[0].startswith('Parse error: ')
    assert err_lines[1] == 'Runtime error: NameError: undefined variable undefined'


def test_repl_without_program_argument(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'stdin', io.StringIO('1 + 2;\n'))
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 0
    assert '3\n' in capsys.readouterr().out


def test_surrogate_escape_is_a_parse_error(tmp_path, capsys):
    path = write(tmp_path, 'surrogate.ss', 'print("\\uD800");\n')
    with pytest.raises(SystemExit) as info:
        main([str(path)])
    assert info.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ''
    assert captured.err.startswith('Parse error: line 1, column 7')
