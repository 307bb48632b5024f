"""JSON serialization/deserialization for the IndoScript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Tokens are stored with their type
name, lexeme, literal and line so that runtime errors raised while
executing a stored AST still point at the right source line.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .ast import (
    Stmt,
    Binary,
    Logical,
    Unary,
    Primary,
    Group,
    Variable,
    Call,
    ExpressionStmt,
    Print,
    VarDeclaration,
    Assign,
    Block,
    If,
    While,
    FunctionDeclaration,
    Return,
)
from .tokens import Token, TokenType
from .types import NIL, NilVal


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {"type": t.type.name, "lexeme": t.lexeme, "literal": t.literal, "line": t.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenType[o["type"]], o["lexeme"], o.get("literal"), int(o["line"]))


def program_to_obj(statements: Sequence[Stmt]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}


def program_from_obj(obj: Dict[str, Any]) -> List[Stmt]:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise ValueError("Invalid program object")
    return [ast_from_obj(s) for s in obj["body"]]


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    # Expressions
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Logical):
        return {
            "type": "Logical",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": token_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Primary):
        # JSON null stands for kosong
        value = None if isinstance(node.value, NilVal) else node.value
        return {"type": "Primary", "value": value}
    if isinstance(node, Group):
        return {"type": "Group", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "arguments": [ast_to_obj(a) for a in node.arguments],
            "paren": token_to_obj(node.paren),
        }

    # Statements
    if isinstance(node, ExpressionStmt):
        return {"type": "ExpressionStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Print):
        return {"type": "Print", "expression": ast_to_obj(node.expression)}
    if isinstance(node, VarDeclaration):
        return {
            "type": "VarDeclaration",
            "name": token_to_obj(node.name),
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, FunctionDeclaration):
        return {
            "type": "FunctionDeclaration",
            "name": token_to_obj(node.name),
            "params": [token_to_obj(p) for p in node.params],
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, Return):
        return {"type": "Return", "keyword": token_to_obj(node.keyword), "value": ast_to_obj(node.value)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")

    # Expressions
    if t == "Binary":
        return Binary(ast_from_obj(obj["left"]), token_from_obj(obj["operator"]), ast_from_obj(obj["right"]))
    if t == "Logical":
        return Logical(ast_from_obj(obj["left"]), token_from_obj(obj["operator"]), ast_from_obj(obj["right"]))
    if t == "Unary":
        return Unary(token_from_obj(obj["operator"]), ast_from_obj(obj["right"]))
    if t == "Primary":
        value = obj.get("value")
        if value is None:
            value = NIL
        elif isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        elif not isinstance(value, (bool, float, str)):
            raise ValueError(f"Invalid literal value: {value!r}")
        return Primary(value)
    if t == "Group":
        return Group(ast_from_obj(obj["expression"]))
    if t == "Variable":
        return Variable(token_from_obj(obj["name"]))
    if t == "Call":
        return Call(
            ast_from_obj(obj["callee"]),
            tuple(ast_from_obj(a) for a in obj["arguments"]),
            token_from_obj(obj["paren"]),
        )

    # Statements
    if t == "ExpressionStmt":
        return ExpressionStmt(ast_from_obj(obj["expression"]))
    if t == "Print":
        return Print(ast_from_obj(obj["expression"]))
    if t == "VarDeclaration":
        return VarDeclaration(token_from_obj(obj["name"]), ast_from_obj(obj["initializer"]))
    if t == "Assign":
        return Assign(token_from_obj(obj["name"]), ast_from_obj(obj["value"]))
    if t == "Block":
        return Block(tuple(ast_from_obj(s) for s in obj["statements"]))
    if t == "If":
        return If(
            ast_from_obj(obj["condition"]),
            ast_from_obj(obj["then_branch"]),
            ast_from_obj(obj["else_branch"]),
        )
    if t == "While":
        return While(ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]))
    if t == "FunctionDeclaration":
        return FunctionDeclaration(
            token_from_obj(obj["name"]),
            tuple(token_from_obj(p) for p in obj["params"]),
            tuple(ast_from_obj(s) for s in obj["body"]),
        )
    if t == "Return":
        return Return(token_from_obj(obj["keyword"]), ast_from_obj(obj.get("value")))

    raise ValueError(f"Unknown AST node type: {t}")
