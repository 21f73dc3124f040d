"""Error types raised by array construction, indexing and composition.

Coordinates or slice starts outside an array raise the built-in
`IndexError`. Everything else derives from `ValueError`, so callers that
only care about "bad input" can catch that.
"""


class LengthError(ValueError):
    """A size or extent is inconsistent, e.g. a slice running past the end
    of an axis or a reshape to a different number of elements.
    """


class DimensionMismatch(LengthError):
    """Two operands (or an operand and a target shape) have incompatible
    shapes.
    """


class RangeError(ValueError):
    """A composite array was asked to select a source that does not exist."""


def shape_mismatch(action: str, *shapes: tuple[int, ...]) -> DimensionMismatch:
    formatted = ", ".join(str(tuple(shape)) for shape in shapes)
    return DimensionMismatch(f"Cannot {action} arrays with shapes {formatted}.")
