"""
Shared utilities for the header generator.
Handles identifier casing and documentation comment formatting.
"""
from typing import Iterable, List, TypeVar

T = TypeVar('T')

# --- Naming ---
# Schema identifiers are lower-case and underscore delimited. Underscores are consumed
# as word separators; only the character after one is upper-cased, everything else
# passes through (so 'whole_map_SIZE' keeps its acronym).

def constant_case(name: str) -> str:
    """'whole_map_size' -> 'WHOLE_MAP_SIZE'"""
    return name.upper()

def _join_words(name: str, capitalize_first: bool) -> str:
    out = []
    capitalize = capitalize_first
    for c in name:
        if capitalize:
            out.append(c.upper())
            capitalize = False
        elif c == '_':
            capitalize = True
        else:
            out.append(c)
    return ''.join(out)

def pascal_case(name: str) -> str:
    """'whole_map_size' -> 'WholeMapSize', 'whole_map_SIZE' -> 'WholeMapSIZE'"""
    return _join_words(name, capitalize_first=True)

def camel_case(name: str) -> str:
    """'whole_map_size' -> 'wholeMapSize'"""
    return _join_words(name, capitalize_first=False)

def sorted_by_name(entities: Iterable[T]) -> List[T]:
    """Stable sort of schema entities by their capitalized name."""
    return sorted(entities, key=lambda e: pascal_case(e.name))

# --- Comments ---

def multiline_comment(text: str, indent: int = 0) -> str:
    """
    Convert free-form text into a C block comment at the given indentation.

                      /**
        Hello    =>    * Hello
        World    =>    * World
                       */

    The result has no trailing newline. Empty text still yields a well-formed block.
    """
    pad = ' ' * indent
    lines = [f"{pad}/**"]
    body = (text or '').strip()
    if body:
        for line in body.splitlines():
            lines.append(f"{pad} * {line}")
    lines.append(f"{pad} */")
    return '\n'.join(lines)
