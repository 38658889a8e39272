"""Abstract Syntax Tree (AST) definitions for ScriptyScript.

The parser lowers every grammar production into one of the node classes
below, and the interpreter has a handler for each of them. The set is closed:
adding a node here means adding its handler to `Interpreter` as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Any


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Integer', 'Float', 'String', 'Bool', 'Nil'


@dataclass
class Ident(Node):
    name: str


@dataclass
class UnaryOp(Node):
    op: str  # 'neg' or 'not'
    operand: Node


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class FuncDef(Node):
    params: List[str]
    body: Block


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class ElseIf:
    condition: Node
    block: Block


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    elseif_clauses: List[ElseIf]
    else_block: Optional[Block]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block


@dataclass
class ForStmt(Node):
    init: Optional[Assign]
    condition: Optional[Node]
    post: Optional[Assign]
    body: Block


@dataclass
class LoopStmt(Node):
    body: Block


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class ExprStmt(Node):
    expr: Node
