"""JSON serialization/deserialization for the PLC AST.

This module converts between PLC AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node becomes a
dict tagged with its class name under "type". Decimal literal payloads
are stored as strings so no precision is lost.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from .ast import (
    Source,
    Field,
    Method,
    ExprStmt,
    DeclStmt,
    AssignStmt,
    IfStmt,
    ForStmt,
    WhileStmt,
    ReturnStmt,
    Literal,
    Group,
    BinaryOp,
    Access,
    Call,
)


def literal_to_obj(node: Literal) -> Dict[str, Any]:
    value = str(node.value) if node.literal_type == 'Decimal' else node.value
    return {"type": "Literal", "literal_type": node.literal_type, "value": value}


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Source):
        return {
            "type": "Source",
            "fields": [ast_to_obj(f) for f in node.fields],
            "methods": [ast_to_obj(m) for m in node.methods],
        }
    if isinstance(node, Field):
        return {
            "type": "Field",
            "name": node.name,
            "is_constant": node.is_constant,
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, Method):
        return {
            "type": "Method",
            "name": node.name,
            "parameters": list(node.parameters),
            "statements": [ast_to_obj(s) for s in node.statements],
        }
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, DeclStmt):
        return {"type": "DeclStmt", "name": node.name, "initializer": ast_to_obj(node.initializer)}
    if isinstance(node, AssignStmt):
        return {"type": "AssignStmt", "receiver": ast_to_obj(node.receiver), "value": ast_to_obj(node.value)}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_statements": [ast_to_obj(s) for s in node.then_statements],
            "else_statements": [ast_to_obj(s) for s in node.else_statements],
        }
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "initializer": ast_to_obj(node.initializer),
            "condition": ast_to_obj(node.condition),
            "increment": ast_to_obj(node.increment),
            "statements": [ast_to_obj(s) for s in node.statements],
        }
    if isinstance(node, WhileStmt):
        return {
            "type": "WhileStmt",
            "condition": ast_to_obj(node.condition),
            "statements": [ast_to_obj(s) for s in node.statements],
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value)}
    if isinstance(node, Literal):
        return literal_to_obj(node)
    if isinstance(node, Group):
        return {"type": "Group", "expression": ast_to_obj(node.expression)}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "operator": node.operator, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, Access):
        return {"type": "Access", "receiver": ast_to_obj(node.receiver), "name": node.name}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "receiver": ast_to_obj(node.receiver),
            "name": node.name,
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Source":
        return Source(
            fields=tuple(ast_from_obj(f) for f in obj["fields"]),
            methods=tuple(ast_from_obj(m) for m in obj["methods"]),
        )
    if t == "Field":
        return Field(
            name=obj["name"],
            is_constant=bool(obj.get("is_constant", False)),
            initializer=ast_from_obj(obj.get("initializer")),
        )
    if t == "Method":
        return Method(
            name=obj["name"],
            parameters=tuple(obj["parameters"]),
            statements=tuple(ast_from_obj(s) for s in obj["statements"]),
        )
    if t == "ExprStmt":
        return ExprStmt(expression=ast_from_obj(obj["expression"]))
    if t == "DeclStmt":
        return DeclStmt(name=obj["name"], initializer=ast_from_obj(obj.get("initializer")))
    if t == "AssignStmt":
        return AssignStmt(receiver=ast_from_obj(obj["receiver"]), value=ast_from_obj(obj["value"]))
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_statements=tuple(ast_from_obj(s) for s in obj["then_statements"]),
            else_statements=tuple(ast_from_obj(s) for s in obj.get("else_statements", [])),
        )
    if t == "ForStmt":
        return ForStmt(
            initializer=ast_from_obj(obj.get("initializer")),
            condition=ast_from_obj(obj["condition"]),
            increment=ast_from_obj(obj.get("increment")),
            statements=tuple(ast_from_obj(s) for s in obj["statements"]),
        )
    if t == "WhileStmt":
        return WhileStmt(
            condition=ast_from_obj(obj["condition"]),
            statements=tuple(ast_from_obj(s) for s in obj["statements"]),
        )
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj["value"]))
    if t == "Literal":
        value = obj["value"]
        if obj["literal_type"] == "Decimal":
            value = Decimal(value)
        return Literal(value=value, literal_type=obj["literal_type"])
    if t == "Group":
        return Group(expression=ast_from_obj(obj["expression"]))
    if t == "BinaryOp":
        return BinaryOp(operator=obj["operator"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "Access":
        return Access(receiver=ast_from_obj(obj.get("receiver")), name=obj["name"])
    if t == "Call":
        return Call(
            receiver=ast_from_obj(obj.get("receiver")),
            name=obj["name"],
            arguments=tuple(ast_from_obj(a) for a in obj["arguments"]),
        )

    raise ValueError(f"Unknown AST node type: {t}")
