"""
Naming utilities for code generation.

Pure identifier case and pluralization conversions shared by the parser,
the classifier, the template helpers and every layer generator.
"""

import re
from typing import List, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


class FileNaming(Enum):
    """File naming conventions for per-entity artifacts."""

    LOWERCASE = "lowercase"  # username.go
    SNAKE_CASE = "snake"  # user_name.go
    KEBAB_CASE = "kebab"  # user-name.go


GO_RESERVED: Set[str] = {
    "break", "case", "chan", "const", "continue", "default", "defer",
    "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
    "interface", "map", "package", "range", "return", "select", "struct",
    "switch", "type", "var",
}

GO_BUILTINS: Set[str] = {
    "bool", "byte", "complex64", "complex128", "error", "float32", "float64",
    "int", "int8", "int16", "int32", "int64", "rune", "string",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "append", "cap", "close", "complex", "copy", "delete", "imag", "len",
    "make", "new", "panic", "print", "println", "real", "recover",
}

_SEPARATORS = re.compile(r"[\s_\-]+")
# Uppercase letter right after a lowercase letter or digit starts a word
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def split_words(name: str) -> List[str]:
    """
    Split an identifier into its words.

    Underscores, hyphens and whitespace separate words, and so does every
    uppercase letter that follows a lowercase letter or digit. Runs of
    capitals stay together, so ``"UserID"`` splits as ``["User", "ID"]``.

    Args:
        name: Identifier in any supported case style

    Returns:
        List of words with their original capitalisation
    """
    words: List[str] = []
    for chunk in _SEPARATORS.split(str(name).strip()):
        if chunk:
            words.extend(part for part in _CASE_BOUNDARY.split(chunk) if part)
    return words


def _capitalize_first(word: str) -> str:
    return word[:1].upper() + word[1:]


def to_pascal(name: str) -> str:
    """Convert to PascalCase, keeping the tail of each word as written."""
    return "".join(_capitalize_first(word) for word in split_words(name))


def to_camel(name: str) -> str:
    """Convert to camelCase (first word fully lower-case)."""
    words = split_words(name)
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize_first(word) for word in words[1:])


def to_snake(name: str) -> str:
    """Convert to snake_case."""
    return "_".join(word.lower() for word in split_words(name))


def to_kebab(name: str) -> str:
    """Convert to kebab-case."""
    return "-".join(word.lower() for word in split_words(name))


def to_screaming_snake(name: str) -> str:
    """Convert to SCREAMING_SNAKE_CASE."""
    return to_snake(name).upper()


def to_plural(word: str) -> str:
    """
    Pluralize a word with a small ordered rule list.

    Rules are applied in order: ``y`` becomes ``ies``, words ending in
    ``s``, ``x``, ``ch`` or ``sh`` take ``es``, everything else takes ``s``.
    Irregular nouns are not handled ("Person" becomes "Persons").

    Args:
        word: Singular word

    Returns:
        Plural form
    """
    if not word:
        return ""

    lower = word.lower()
    if lower.endswith("y"):
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "ch", "sh")):
        return word + "es"
    return word + "s"


def to_singular(word: str) -> str:
    """
    Singularize a word, inverting the rules of ``to_plural``.

    Args:
        word: Plural word

    Returns:
        Singular form
    """
    if not word:
        return ""

    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower.endswith("es") and lower[:-2].endswith(("s", "x", "ch", "sh")):
        return word[:-2]
    if lower.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    if target_case == NamingCase.SNAKE_CASE:
        return to_snake(name)
    elif target_case == NamingCase.CAMEL_CASE:
        return to_camel(name)
    elif target_case == NamingCase.PASCAL_CASE:
        return to_pascal(name)
    elif target_case == NamingCase.KEBAB_CASE:
        return to_kebab(name)
    elif target_case == NamingCase.SCREAMING_SNAKE:
        return to_screaming_snake(name)
    else:
        return name


def go_identifier(name: str, suffix_on_conflict: str = "Value") -> str:
    """
    Build a camelCase Go identifier for parameters and locals.

    Names that collide with Go keywords or predeclared identifiers get
    ``suffix_on_conflict`` appended (``type`` becomes ``typeValue``).

    Args:
        name: Field or entity name
        suffix_on_conflict: Suffix to add for conflicts

    Returns:
        Safe Go identifier
    """
    ident = to_camel(name) or "value"
    if ident in GO_RESERVED or ident in GO_BUILTINS:
        ident = f"{ident}{suffix_on_conflict}"
    return ident


def receiver_name(entity: str) -> str:
    """Single-letter method receiver for an entity type."""
    return (entity[:1] or "x").lower()


def file_name(entity: str, convention: str = FileNaming.LOWERCASE.value) -> str:
    """
    Base file name for a per-entity artifact.

    Args:
        entity: Entity name in any case
        convention: One of ``lowercase``, ``snake`` or ``kebab``

    Returns:
        File name without extension
    """
    if convention == FileNaming.SNAKE_CASE.value:
        return to_snake(entity)
    if convention == FileNaming.KEBAB_CASE.value:
        return to_kebab(entity)
    return "".join(split_words(entity)).lower()


def table_name(entity: str) -> str:
    """Database table name for an entity (snake_case plural)."""
    return to_plural(to_snake(entity))


def route_segment(entity: str) -> str:
    """URL path segment for an entity collection (kebab-case plural)."""
    return to_plural(to_kebab(entity))
