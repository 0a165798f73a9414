"""
Helpers for hierarchical, dot-separated food codes such as "A.01.02.003".

The level of a code is its number of dots; the level-n category of a code is
its first n+1 parts ("A.01.02.003" -> level 1 "A.01", level 2 "A.01.02").
Codes in the "I." family share their categories with the "A." family.
"""

SEPARATOR = "."


def get_code_level(code: str) -> int:
    return code.count(SEPARATOR)


def normalize_code_family(code: str) -> str:
    """Map "I."-prefixed codes onto the equivalent "A." code."""
    if code.startswith("I" + SEPARATOR):
        return "A" + code[1:]
    return code


def get_code_subset(code: str, level: int, normalize: bool = False) -> str:
    """
    Category code of the given level. Codes shallower than `level` are
    returned whole.
    """
    subset = SEPARATOR.join(code.split(SEPARATOR)[: level + 1])
    return normalize_code_family(subset) if normalize else subset
