"""Set operations over ordered lists of module codes.

Lists are treated as multisets: duplicates are data and survive every
operation. Removal is by value, so a value present in the right-hand operand
removes (or keeps) every one of its occurrences on the left.
"""

from collections.abc import Sequence

from .errors import ArgumentError


def union(first: Sequence[str], second: Sequence[str]) -> list[str]:
    """Concatenate two code lists, keeping order and duplicates."""
    return [*first, *second]


def intersection(first: Sequence[str], second: Sequence[str]) -> list[str]:
    """Keep every occurrence in ``first`` of a value that also appears in ``second``."""
    present = set(second)
    return [code for code in first if code in present]


def difference(first: Sequence[str], second: Sequence[str]) -> list[str]:
    """Remove from ``first`` every occurrence of any value that appears in ``second``."""
    removed = set(second)
    return [code for code in first if code not in removed]


def union_all(operands: Sequence[Sequence[str]]) -> list[str]:
    """Union of any number of code lists, in operand order."""
    result: list[str] = []
    for operand in operands:
        result = union(result, operand)
    return result


def intersection_all(operands: Sequence[Sequence[str]]) -> list[str]:
    """Intersection across all operands, ordered as the first operand.

    Raises:
        ArgumentError: If no operands are given
    """
    if not operands:
        raise ArgumentError("Intersection requires at least one profile")

    result = list(operands[0])
    for operand in operands:
        result = intersection(result, operand)
    return result


def difference_all(operands: Sequence[Sequence[str]]) -> list[str]:
    """Difference of exactly two operands.

    Raises:
        ArgumentError: If the operand count is not two
    """
    if len(operands) != 2:
        raise ArgumentError(f"Difference requires exactly 2 profiles, got {len(operands)}")
    return difference(operands[0], operands[1])


def collapse_duplicates(codes: Sequence[str]) -> list[str]:
    """Keep the first occurrence of each code."""
    return list(dict.fromkeys(codes))
