"""Tree-walking interpreter for ScriptyScript.

`Interpreter.execute` runs statements for their effect and returns a control
signal: `None` when execution falls through normally, or one of `BREAK`,
`CONTINUE` and `ReturnSignal(value)`. Block execution stops at the first
signal and hands it upward until a loop (break/continue) or a function call
(return) consumes it. `Interpreter.evaluate` computes expression values.

Runtime errors are raised as `ScriptRuntimeError` and are never caught inside
the interpreter; the driver reports them.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Type

from .ast import (
    Program, Literal, Ident, UnaryOp, BinaryOp, Assign, FuncDef, Call,
    Block, IfStmt, WhileStmt, ForStmt, LoopStmt, BreakStmt, ContinueStmt,
    ReturnStmt, ExprStmt, Node
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import ScriptRuntimeError, Signal, ReturnSignal, BREAK, CONTINUE
from .parser import parse_program
from .std.core import populate_core_environment
from .types import (
    NIL, Closure, check_int, is_integer, is_number, is_truthy,
    values_equal, to_string, type_name,
)

logger = logging.getLogger(__name__)


class Interpreter:
    """Core interpreter that executes ScriptyScript ASTs."""
    def __init__(self, debug_level: int = 0):
        self.global_env = Environment()
        self.debug_level = debug_level
        self._statement_handlers: Dict[Type[Node], Callable[[Any, Environment], Optional[Signal]]] = {
            ExprStmt: self.exec_expr_stmt,
            Assign: self.exec_assign,
            Block: self.exec_block,
            IfStmt: self.exec_if,
            WhileStmt: self.exec_while,
            ForStmt: self.exec_for,
            LoopStmt: self.exec_loop,
            BreakStmt: self.exec_break,
            ContinueStmt: self.exec_continue,
            ReturnStmt: self.exec_return,
        }
        self._expression_handlers: Dict[Type[Node], Callable[[Any, Environment], Any]] = {
            Literal: self.eval_literal,
            Ident: self.eval_ident,
            UnaryOp: self.eval_unary,
            BinaryOp: self.eval_binary,
            FuncDef: self.eval_func_def,
            Call: self.eval_call,
        }
        populate_core_environment(self, self.global_env)

    def debug(self, level: int, msg: str, *args):
        if self.debug_level >= level:
            logger.debug(msg, *args)

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute a program and return the value of its last statement.

        Expression statements and assignments produce a value; every other
        statement produces nil. A top-level `return` ends the program early
        with its value.
        """
        if env is None:
            env = self.global_env
        self.debug(1, "run program: %d statements", len(program.body))
        try:
            result = NIL
            for stmt in program.body:
                if isinstance(stmt, ExprStmt):
                    result = self.evaluate(stmt.expr, env)
                    continue
                if isinstance(stmt, Assign):
                    result = self.assign(stmt, env)
                    continue
                result = NIL
                signal = self.execute(stmt, env)
                if isinstance(signal, ReturnSignal):
                    return signal.value
                if signal is not None:
                    raise self.escaped_signal_error(signal)
            return result
        except RecursionError:
            raise ScriptRuntimeError('RecursionError', 'maximum recursion depth exceeded') from None
        finally:
            self.debug(1, "program finished")

    def run_source(self, source: str, env: Optional[Environment] = None) -> Any:
        return self.run(parse_program(source), env)

    def supports(self, node_type: Type[Node]) -> bool:
        return node_type in self._statement_handlers or node_type in self._expression_handlers

    # Statements
    def execute_block(self, statements: List[Node], env: Environment) -> Optional[Signal]:
        for stmt in statements:
            signal = self.execute(stmt, env)
            # stop at the first break/continue/return and hand it upward
            if signal is not None:
                return signal
        return None

    def execute(self, node: Node, env: Environment) -> Optional[Signal]:
        handler = self._statement_handlers.get(type(node))
        if handler is None:
            raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")
        return handler(node, env)

    def exec_expr_stmt(self, node: ExprStmt, env: Environment) -> Optional[Signal]:
        self.evaluate(node.expr, env)
        return None

    def exec_assign(self, node: Assign, env: Environment) -> Optional[Signal]:
        self.assign(node, env)
        return None

    def exec_block(self, node: Block, env: Environment) -> Optional[Signal]:
        return self.execute_block(node.statements, env)

    def exec_if(self, node: IfStmt, env: Environment) -> Optional[Signal]:
        cond = self.evaluate(node.condition, env)
        self.debug(3, "if condition %s -> %s", to_string(cond), is_truthy(cond))
        if is_truthy(cond):
            return self.execute_block(node.then_block.statements, env)
        for clause in node.elseif_clauses:
            cond = self.evaluate(clause.condition, env)
            self.debug(3, "else if condition %s -> %s", to_string(cond), is_truthy(cond))
            if is_truthy(cond):
                return self.execute_block(clause.block.statements, env)
        if node.else_block is not None:
            return self.execute_block(node.else_block.statements, env)
        return None

    def exec_while(self, node: WhileStmt, env: Environment) -> Optional[Signal]:
        while is_truthy(self.evaluate(node.condition, env)):
            signal = self.execute_block(node.body.statements, env)
            if signal is BREAK:
                self.debug(3, "while: break")
                break
            if signal is CONTINUE:
                continue
            if signal is not None:
                return signal
        return None

    def exec_loop(self, node: LoopStmt, env: Environment) -> Optional[Signal]:
        while True:
            signal = self.execute_block(node.body.statements, env)
            if signal is BREAK:
                self.debug(3, "loop: break")
                break
            if signal is CONTINUE:
                continue
            if signal is not None:
                return signal
        return None

    def exec_for(self, node: ForStmt, env: Environment) -> Optional[Signal]:
        # one scope for the init binding, shared by every iteration
        for_env = Environment(parent=env)
        if node.init is not None:
            self.assign(node.init, for_env, local=True)
        while True:
            if node.condition is not None:
                cond = self.evaluate(node.condition, for_env)
                if not is_truthy(cond):
                    break
            signal = self.execute_block(node.body.statements, for_env)
            if signal is BREAK:
                self.debug(3, "for: break")
                break
            # continue still runs the increment
            if signal is not None and signal is not CONTINUE:
                return signal
            if node.post is not None:
                self.assign(node.post, for_env)
        return None

    def exec_break(self, node: BreakStmt, env: Environment) -> Optional[Signal]:
        return BREAK

    def exec_continue(self, node: ContinueStmt, env: Environment) -> Optional[Signal]:
        return CONTINUE

    def exec_return(self, node: ReturnStmt, env: Environment) -> Optional[Signal]:
        value = self.evaluate(node.value, env) if node.value is not None else NIL
        return ReturnSignal(value)

    def assign(self, node: Assign, env: Environment, local: bool = False) -> Any:
        # the right-hand side is evaluated completely before anything is bound
        value = self.evaluate(node.value, env)
        if local:
            env.define(node.name, value)
        else:
            env.set(node.name, value)
        self.debug(2, "assign %s: %s = %s", node.name, type_name(value), to_string(value))
        return value

    # Expressions
    def evaluate(self, node: Node, env: Environment) -> Any:
        handler = self._expression_handlers.get(type(node))
        if handler is None:
            raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")
        return handler(node, env)

    def eval_literal(self, node: Literal, env: Environment) -> Any:
        return node.value

    def eval_ident(self, node: Ident, env: Environment) -> Any:
        return env.get(node.name)

    def eval_func_def(self, node: FuncDef, env: Environment) -> Any:
        return Closure(node.params, node.body, env)

    def eval_unary(self, node: UnaryOp, env: Environment) -> Any:
        operand = self.evaluate(node.operand, env)
        if node.op == 'not':
            return not is_truthy(operand)
        if node.op == 'neg':
            if is_integer(operand):
                return check_int(-operand)
            if isinstance(operand, float):
                return -operand
            raise ScriptRuntimeError('TypeError', f'unary - expects a number, got {type_name(operand)}')
        raise ScriptRuntimeError('TypeError', f'unsupported unary operator {node.op}')

    def eval_binary(self, node: BinaryOp, env: Environment) -> Any:
        left = self.evaluate(node.left, env)
        # Short-circuit for and/or
        if node.op == 'and':
            if not is_truthy(left):
                return False
            return is_truthy(self.evaluate(node.right, env))
        if node.op == 'or':
            if is_truthy(left):
                return True
            return is_truthy(self.evaluate(node.right, env))
        right = self.evaluate(node.right, env)
        return self.apply_binary_op(node.op, left, right)

    def eval_call(self, node: Call, env: Environment) -> Any:
        func = self.evaluate(node.func, env)
        args = [self.evaluate(arg, env) for arg in node.args]
        return self.call_function(func, args, env)

    def call_function(self, func: Any, args: List[Any], env: Environment) -> Any:
        if isinstance(func, BuiltinFunction):
            # Check arity; None means variadic
            if func.arity is not None and len(args) != func.arity:
                raise ScriptRuntimeError('ArityError', f"{func.name} expects {func.arity} arguments, got {len(args)}")
            self.debug(2, "call builtin %s with %d arguments", func.name, len(args))
            if func.passes_env:
                return func.fn(args, env)
            return func.fn(args)
        if isinstance(func, Closure):
            if len(args) != len(func.params):
                raise ScriptRuntimeError('ArityError', f"{func!r} expects {len(func.params)} arguments, got {len(args)}")
            # The call frame hangs off the closure's environment, not the caller's
            call_env = Environment(parent=func.env)
            for name, arg in zip(func.params, args):
                call_env.define(name, arg)
            self.debug(2, "call %r at depth %d", func, call_env.depth())
            signal = self.execute_block(func.body.statements, call_env)
            if isinstance(signal, ReturnSignal):
                return signal.value
            if signal is not None:
                raise self.escaped_signal_error(signal)
            return NIL
        raise ScriptRuntimeError('TypeError', f'{type_name(func)} value {to_string(func)} is not callable')

    def escaped_signal_error(self, signal: Signal) -> ScriptRuntimeError:
        keyword = 'break' if signal is BREAK else 'continue'
        return ScriptRuntimeError('ControlFlowError', f'{keyword} outside loop')

    # Operators
    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            # If either operand is a string, perform concatenation
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
            return self.arithmetic(op, a, b)
        if op in ('-', '*', '/', '%'):
            return self.arithmetic(op, a, b)
        if op in ('==', '!='):
            eq = values_equal(a, b)
            return eq if op == '==' else not eq
        if op in ('<', '>', '<=', '>='):
            # numeric comparisons only
            if not (is_number(a) and is_number(b)):
                raise ScriptRuntimeError('TypeError', f'comparison {op} not supported for {type_name(a)} and {type_name(b)}')
            if op == '<': return a < b
            if op == '>': return a > b
            if op == '<=': return a <= b
            return a >= b
        raise ScriptRuntimeError('TypeError', f'unknown operator {op}')

    def arithmetic(self, op: str, a: Any, b: Any) -> Any:
        if not (is_number(a) and is_number(b)):
            raise ScriptRuntimeError('TypeError', f'unsupported {op} for {type_name(a)} and {type_name(b)}')
        if op in ('/', '%') and b == 0:
            raise ScriptRuntimeError('ZeroDivisionError', 'division by zero' if op == '/' else 'modulo by zero')
        if is_integer(a) and is_integer(b):
            if op == '+':
                return check_int(a + b)
            if op == '-':
                return check_int(a - b)
            if op == '*':
                return check_int(a * b)
            # integer division truncates toward zero, the remainder takes the dividend's sign
            quotient = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                quotient = -quotient
            if op == '/':
                return check_int(quotient)
            return a - b * quotient
        # a float operand promotes the operation to Float
        a, b = float(a), float(b)
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            return a / b
        return math.fmod(a, b)


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a program from a source string."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(ast_program)


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a .ss file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run(ast_program)
    return interpreter
