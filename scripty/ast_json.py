"""JSON serialization/deserialization for ScriptyScript ASTs.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. It supports a full round-trip for all
node types; the `nil` literal is stored as JSON null.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    Program,
    Literal,
    Ident,
    UnaryOp,
    BinaryOp,
    Assign,
    FuncDef,
    Call,
    Block,
    ElseIf,
    IfStmt,
    WhileStmt,
    ForStmt,
    LoopStmt,
    BreakStmt,
    ContinueStmt,
    ReturnStmt,
    ExprStmt,
)
from .types import NIL, NilVal


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None:
        return None
    if isinstance(node, NilVal):
        return None
    if isinstance(node, (int, float, str, bool)):
        return node

    # Node types
    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, ElseIf):
        return {"type": "ElseIf", "condition": ast_to_obj(node.condition), "block": ast_to_obj(node.block)}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "elseif_clauses": [ast_to_obj(c) for c in node.elseif_clauses],
            "else_block": ast_to_obj(node.else_block),
        }
    if isinstance(node, WhileStmt):
        return {"type": "WhileStmt", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "init": ast_to_obj(node.init),
            "condition": ast_to_obj(node.condition),
            "post": ast_to_obj(node.post),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, LoopStmt):
        return {"type": "LoopStmt", "body": ast_to_obj(node.body)}
    if isinstance(node, BreakStmt):
        return {"type": "BreakStmt"}
    if isinstance(node, ContinueStmt):
        return {"type": "ContinueStmt"}
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value)}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, FuncDef):
        return {"type": "FuncDef", "params": list(node.params), "body": ast_to_obj(node.body)}
    if isinstance(node, Call):
        return {"type": "Call", "func": ast_to_obj(node.func), "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": ast_to_obj(node.value), "literal_type": node.literal_type}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=[ast_from_obj(n) for n in obj["body"]])
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "ElseIf":
        return ElseIf(condition=ast_from_obj(obj["condition"]), block=ast_from_obj(obj["block"]))
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            elseif_clauses=[ast_from_obj(c) for c in obj.get("elseif_clauses", [])],
            else_block=ast_from_obj(obj.get("else_block")),
        )
    if t == "WhileStmt":
        return WhileStmt(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "ForStmt":
        return ForStmt(
            init=ast_from_obj(obj.get("init")),
            condition=ast_from_obj(obj.get("condition")),
            post=ast_from_obj(obj.get("post")),
            body=ast_from_obj(obj["body"]),
        )
    if t == "LoopStmt":
        return LoopStmt(body=ast_from_obj(obj["body"]))
    if t == "BreakStmt":
        return BreakStmt()
    if t == "ContinueStmt":
        return ContinueStmt()
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj.get("value")))
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "FuncDef":
        return FuncDef(params=list(obj["params"]), body=ast_from_obj(obj["body"]))
    if t == "Call":
        return Call(func=ast_from_obj(obj["func"]), args=[ast_from_obj(a) for a in obj["args"]])
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "Literal":
        literal_type = obj["literal_type"]
        if literal_type == "Nil":
            return Literal(value=NIL, literal_type=literal_type)
        value = ast_from_obj(obj["value"])
        if literal_type == "Float":
            # hand-written AST files may spell 2.0 as 2
            value = float(value)
        return Literal(value=value, literal_type=literal_type)
    if t == "Ident":
        return Ident(name=obj["name"])

    raise ValueError(f"Unknown AST node type: {t}")
