# ScriptyScript language package
# This package provides the parser and tree-walking interpreter for ScriptyScript.
import logging

from .parser import parse_program
from .interpreter import run_program, run_file, Interpreter
from .errors import ScriptyError, ParseError, ScriptRuntimeError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'parse_program',
    'run_program',
    'run_file',
    'Interpreter',
    'ScriptyError',
    'ParseError',
    'ScriptRuntimeError',
]
