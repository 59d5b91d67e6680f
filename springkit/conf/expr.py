"""A small expression language for validating bound configuration values.

Expressions support numbers, strings, ``true``/``false``/``nil``, names looked
up in an environment, function calls, arithmetic, comparisons, ``in`` and the
boolean operators ``&&``/``and``, ``||``/``or`` and ``!``/``not``.
"""

from __future__ import annotations

import json
import operator
import re
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple


class ExprError(ValueError):
    """Raised when an expression cannot be parsed, evaluated or validated."""


_Node = Callable[[Mapping[str, Any]], Any]


class _Token(NamedTuple):
    kind: str
    text: str
    pos: int


_TOKEN_RE = re.compile(
    r"""
     (?P<ws>\s+)
    |(?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
    |(?P<op>\*\*|==|!=|<=|>=|&&|\|\||[-+*/%<>!(),])
    """,
    re.VERBOSE | re.DOTALL,
)

_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'"}

_PRECEDENCE = {
    "or": 1,
    "||": 1,
    "and": 2,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 4,
    "<=": 4,
    ">": 4,
    ">=": 4,
    "in": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
    "%": 6,
}
_UNARY = {"-", "+", "!", "not"}
_CONSTANTS = {"true": True, "false": False, "nil": None}
_KEYWORDS = {"and", "or", "not", "in"}

_COMPARE = {"<": operator.lt, "<=": operator.le, ">": operator.gt, ">=": operator.ge}
_ARITHMETIC = {"+": operator.add, "-": operator.sub, "*": operator.mul, "**": operator.pow}


def _contains(container: Any, item: Any) -> bool:
    return item in container


_BUILTINS: dict[str, Callable[..., Any]] = {
    "abs": abs,
    "len": len,
    "min": min,
    "max": max,
    "contains": _contains,
    "hasPrefix": str.startswith,
    "hasSuffix": str.endswith,
    "upper": str.upper,
    "lower": str.lower,
    "trim": str.strip,
    "int": int,
    "float": float,
    "string": str,
}

_validate_funcs: dict[str, Callable[..., Any]] = {}


def _type_name(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _mismatch(op: str, a: Any, b: Any) -> ExprError:
    return ExprError(f"invalid operation: {_type_name(a)} {op} {_type_name(b)}")


def _as_bool(value: Any, op: str) -> bool:
    if not isinstance(value, bool):
        raise ExprError(f"invalid operation: {op} on {_type_name(value)}, bool expected")
    return value


def _apply(op: str, a: Any, b: Any) -> Any:
    if op == "==":
        return a == b
    if op == "!=":
        return a != b
    if op == "in":
        if isinstance(b, str):
            if not isinstance(a, str):
                raise _mismatch(op, a, b)
            return a in b
        if isinstance(b, (list, tuple, set, frozenset, dict)):
            return a in b
        raise _mismatch(op, a, b)
    if op in _COMPARE:
        if (_is_number(a) and _is_number(b)) or (isinstance(a, str) and isinstance(b, str)):
            return _COMPARE[op](a, b)
        raise _mismatch(op, a, b)
    if op == "+" and isinstance(a, str) and isinstance(b, str):
        return a + b
    if not (_is_number(a) and _is_number(b)):
        raise _mismatch(op, a, b)
    if op == "/":
        if b == 0:
            raise ExprError("division by zero")
        return a / b
    if op == "%":
        if not (_is_int(a) and _is_int(b)):
            raise _mismatch(op, a, b)
        if b == 0:
            raise ExprError("integer divide by zero")
        return a % b
    return _ARITHMETIC[op](a, b)


def _make_binary(op: str, left: _Node, right: _Node) -> _Node:
    if op in ("and", "&&"):

        def conjunction(env: Mapping[str, Any]) -> bool:
            return _as_bool(left(env), op) and _as_bool(right(env), op)

        return conjunction
    if op in ("or", "||"):

        def disjunction(env: Mapping[str, Any]) -> bool:
            return _as_bool(left(env), op) or _as_bool(right(env), op)

        return disjunction

    def binary(env: Mapping[str, Any]) -> Any:
        return _apply(op, left(env), right(env))

    return binary


def _make_unary(op: str, operand: _Node) -> _Node:
    def unary(env: Mapping[str, Any]) -> Any:
        value = operand(env)
        if op in ("!", "not"):
            return not _as_bool(value, op)
        if not _is_number(value):
            raise ExprError(f"invalid operation: {op} on {_type_name(value)}")
        return -value if op == "-" else value

    return unary


def _make_name(name: str) -> _Node:
    def lookup(env: Mapping[str, Any]) -> Any:
        if name in env:
            return env[name]
        if name in _BUILTINS:
            return _BUILTINS[name]
        raise ExprError(f"unknown name {name}")

    return lookup


def _make_call(name: str, args: list[_Node]) -> _Node:
    callee = _make_name(name)

    def call(env: Mapping[str, Any]) -> Any:
        fn = callee(env)
        if not callable(fn):
            raise ExprError(f"{name} is not a function")
        values = [arg(env) for arg in args]
        try:
            return fn(*values)
        except ExprError:
            raise
        except Exception as exc:
            raise ExprError(f"call {name}: {exc}") from exc

    return call


def _constant(value: Any) -> _Node:
    return lambda env: value


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(
        r"\\(.)",
        lambda m: _STRING_ESCAPES.get(m.group(1), m.group(1)),
        body,
        flags=re.DOTALL,
    )


def _tokenize(expression: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            raise ExprError(f"unexpected character {expression[pos]!r} at position {pos}")
        kind = match.lastgroup or ""
        if kind != "ws":
            tokens.append(_Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, expression: str) -> None:
        self._tokens = _tokenize(expression)
        self._pos = 0

    def parse(self) -> _Node:
        if not self._tokens:
            raise ExprError("empty expression")
        node = self._binary(1)
        token = self._peek()
        if token is not None:
            raise self._unexpected(token)
        return node

    def _peek(self) -> _Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise ExprError("unexpected end of expression")
        self._pos += 1
        return token

    @staticmethod
    def _unexpected(token: _Token) -> ExprError:
        return ExprError(f"unexpected token {token.text!r} at position {token.pos}")

    @staticmethod
    def _is_symbol(token: _Token | None, text: str) -> bool:
        return token is not None and token.kind in ("op", "name") and token.text == text

    def _accept(self, text: str) -> bool:
        if self._is_symbol(self._peek(), text):
            self._pos += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            token = self._peek()
            if token is None:
                raise ExprError(f"unexpected end of expression, expected {text!r}")
            raise self._unexpected(token)

    def _binary(self, min_prec: int) -> _Node:
        left = self._unary()
        while (token := self._peek()) is not None and token.kind in ("op", "name"):
            prec = _PRECEDENCE.get(token.text)
            if prec is None or prec < min_prec:
                break
            self._pos += 1
            right = self._binary(prec + 1)
            left = _make_binary(token.text, left, right)
        return left

    def _unary(self) -> _Node:
        token = self._peek()
        if token is not None and token.kind in ("op", "name") and token.text in _UNARY:
            self._pos += 1
            return _make_unary(token.text, self._unary())
        return self._power()

    def _power(self) -> _Node:
        base = self._primary()
        if self._accept("**"):
            return _make_binary("**", base, self._unary())
        return base

    def _primary(self) -> _Node:
        token = self._next()
        if token.kind == "number":
            text = token.text
            return _constant(float(text) if any(c in text for c in ".eE") else int(text))
        if token.kind == "string":
            return _constant(_unquote(token.text))
        if token.kind == "name":
            if token.text in _CONSTANTS:
                return _constant(_CONSTANTS[token.text])
            if token.text in _KEYWORDS:
                raise self._unexpected(token)
            if self._accept("("):
                return _make_call(token.text, self._arguments())
            return _make_name(token.text)
        if token.text == "(":
            node = self._binary(1)
            self._expect(")")
            return node
        raise self._unexpected(token)

    def _arguments(self) -> list[_Node]:
        if self._accept(")"):
            return []
        args = [self._binary(1)]
        while self._accept(","):
            args.append(self._binary(1))
        self._expect(")")
        return args


def evaluate(expression: str, env: Mapping[str, Any] | None = None) -> Any:
    """Evaluate ``expression`` with names taken from ``env``.

    Raises ExprError on syntax or evaluation errors.
    """
    node = _Parser(expression).parse()
    try:
        return node(env if env is not None else {})
    except ArithmeticError as exc:
        raise ExprError(str(exc)) from exc


def register_validate_func(name: str, fn: Callable[..., Any]) -> None:
    """Make ``fn`` callable by ``name`` in validation expressions."""
    _validate_funcs[name] = fn


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    return str(value)


def validate_field(tag: str, value: Any) -> None:
    """Check ``value`` against the expression ``tag``, where ``$`` is the value.

    Raises ExprError when evaluation fails, the result is not a bool, or the
    result is false.
    """
    env = {"$": value, **_validate_funcs}
    quoted = json.dumps(tag, ensure_ascii=False)
    try:
        result = evaluate(tag, env)
    except ExprError as exc:
        raise ExprError(f"eval {quoted} returns error, {exc}") from exc
    if not isinstance(result, bool):
        raise ExprError(f"eval {quoted} doesn't return bool value")
    if not result:
        raise ExprError(f"validate failed on {quoted} for value {_format_value(value)}")