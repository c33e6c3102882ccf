"""
Text helpers for payloads coming from the backend.
"""
from typing import Any
from urllib.parse import unquote


def decode_text(text: Any) -> Any:
    """
    Decodes a URL-encoded value where '+' stands for a space.
    Non-strings and undecodable input are returned unchanged.

    Examples:
        >>> decode_text("G%C3%B6teborg+City")
        'Göteborg City'
    """
    if not isinstance(text, str):
        return text
    try:
        return unquote(text.replace("+", " "), errors="strict")
    except UnicodeDecodeError:
        return text


def to_float(value: Any, default: float = 0.0) -> float:
    """Backend amounts arrive as numbers or numeric strings"""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def contains_ignore_case(value: Any, term: str) -> bool:
    """True when value is a string containing term, case-insensitive"""
    return isinstance(value, str) and term.lower() in value.lower()
