from . import operations
from scripty.builtin_function import BuiltinFunction
from scripty.errors import ParseError, ScriptRuntimeError
from scripty.environment import Environment
from scripty.parser import parse_program
from scripty.types import NIL, is_integer, to_string
from typing import List, Any


def populate_core_environment(interpreter, env: Environment) -> Environment:
        """Register the core built-in functions in `env` and return it."""

        def std_print(args: List[Any]) -> Any:
            operations.write_line(args)
            return NIL

        def std_to_string(args: List[Any]) -> Any:
            return to_string(args[0])

        def std_int(args: List[Any]) -> Any:
            return operations.to_int(args[0])

        def std_float(args: List[Any]) -> Any:
            return operations.to_float(args[0])

        def std_max(args: List[Any]) -> Any:
            if len(args) < 2:
                raise ScriptRuntimeError('ArityError', 'max expects at least 2 arguments')
            return operations.extreme('max', args, lambda left, right: left >= right)

        def std_min(args: List[Any]) -> Any:
            if len(args) < 2:
                raise ScriptRuntimeError('ArityError', 'min expects at least 2 arguments')
            return operations.extreme('min', args, lambda left, right: left <= right)

        def std_round(args: List[Any]) -> Any:
            return operations.round_value(args[0])

        def std_abs(args: List[Any]) -> Any:
            return operations.abs_value(args[0])

        def std_input(args: List[Any]) -> Any:
            if len(args) > 1:
                raise ScriptRuntimeError('ArityError', 'input expects at most 1 argument')
            prompt = args[0] if args else ''
            if not isinstance(prompt, str):
                raise ScriptRuntimeError('TypeError', 'input prompt must be a String')
            return operations.read_line(prompt)

        def std_exit(args: List[Any]) -> Any:
            if len(args) > 1:
                raise ScriptRuntimeError('ArityError', 'exit expects at most 1 argument')
            code = args[0] if args else 0
            if not is_integer(code):
                raise ScriptRuntimeError('TypeError', 'exit code must be an Integer')
            raise SystemExit(code)

        def std_exec(args: List[Any], calling_env: Environment) -> Any:
            source = args[0]
            if not isinstance(source, str):
                raise ScriptRuntimeError('TypeError', 'exec expects a String')
            try:
                program = parse_program(source)
            except ParseError as e:
                return str(e)
            # a fresh child scope: new names stay local, existing ones are reassigned in place
            return interpreter.run(program, Environment(parent=calling_env))

        env.values['print'] = BuiltinFunction('print', None, std_print)
        env.values['to_string'] = BuiltinFunction('to_string', 1, std_to_string)
        env.values['string'] = BuiltinFunction('string', 1, std_to_string)
        env.values['int'] = BuiltinFunction('int', 1, std_int)
        env.values['float'] = BuiltinFunction('float', 1, std_float)
        env.values['max'] = BuiltinFunction('max', None, std_max)
        env.values['min'] = BuiltinFunction('min', None, std_min)
        env.values['round'] = BuiltinFunction('round', 1, std_round)
        env.values['abs'] = BuiltinFunction('abs', 1, std_abs)
        env.values['input'] = BuiltinFunction('input', None, std_input)
        env.values['exit'] = BuiltinFunction('exit', None, std_exit)
        env.values['exec'] = BuiltinFunction('exec', 1, std_exec, passes_env=True)

        return env
