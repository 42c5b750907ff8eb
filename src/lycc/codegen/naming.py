"""
Operand naming for the data segment.

Numeric literals are normalized before they are declared, then every
operand is turned into an assembler-safe label:

| Operand      | Normalized | Label          |
|--------------|------------|----------------|
| .99          | 0.99       | _0_99          |
| 99.          | 99.0       | _99_0          |
| 5            | 5.0        | _5_0           |
| -3.2         | -3.2       | _neg_3_2       |
| total        | -          | _total         |
| "hola"       | -          | _STR_<hash>    |
| temporary 3  | -          | @T3            |
"""

import hashlib
import re

INTEGER_PATTERN = re.compile(r"^-?\d+$")

TEMP_SIGIL = "@T"
STRING_PREFIX = "_STR_"
STRING_HASH_DIGITS = 8


def normalize_number(text: str) -> str:
    """
    Normalize a numeric literal to the ``digits.digits`` form.

    Idempotent: normalize_number(normalize_number(x)) == normalize_number(x).
    """
    sign = ""
    body = text
    if body.startswith("-"):
        sign, body = "-", body[1:]

    if body.startswith("."):
        body = "0" + body
    if body.endswith("."):
        body = body + "0"
    if "." not in body:
        body = body + ".0"
    return sign + body


def is_integer_literal(text: str) -> bool:
    return bool(INTEGER_PATTERN.match(text))


def sanitize(name: str) -> str:
    """Make a name label-safe: '.' -> '_', leading '-' -> 'neg_'."""
    if name.startswith("-"):
        name = "neg_" + name[1:]
    return name.replace(".", "_")


def variable_label(name: str) -> str:
    return "_" + sanitize(name)


def constant_label(text: str) -> str:
    """Label of a numeric constant, after normalization."""
    return "_" + sanitize(normalize_number(text))


def string_label(content: str) -> str:
    """Stable label for a string literal, keyed by its content."""
    digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
    return STRING_PREFIX + digest[:STRING_HASH_DIGITS].upper()


def temporary_label(number: int) -> str:
    return f"{TEMP_SIGIL}{number}"
