"""
Fixed-Length Numeric Vectors for Prognostics Models

State, input, output, predicted-output and event-state vectors are all the
same structure: an ordered array of doubles whose length is fixed when the
vector is created. The names that give each slot its meaning are owned by
the model definition (see VariableNames), not by the vector, so a vector
is only a plain numpy array with a role attached.

Example:
    >>> names = VariableNames(["charge", "resistance"], role="state")
    >>> x = StateVector([1.5, 0.02])
    >>> names.get(x, "resistance")
    0.02
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Optional, Union

import numpy as np

from prognostics.exceptions import (
    ConstructionError,
    OutOfRangeError,
    PreconditionError,
)


class NamedVector:
    """Fixed-length vector of float64 values.

    Construct with a length to get a vector of zeros, or with a sequence of
    values which are copied. Copying and assignment use value semantics and
    nothing can change the length once the vector exists.

    Attributes:
        ROLE: Human-readable role of the vector, used in error messages
    """

    __slots__ = ("_values",)

    ROLE = "vector"

    def __init__(self, values: Union[int, Sequence[float], np.ndarray] = 0):
        """Initialize vector.

        Args:
            values: Either the number of elements (all set to 0.0) or the
                    initial values

        Raises:
            ConstructionError: If the length is negative or the values are
                               not a flat numeric sequence
        """
        if isinstance(values, (int, np.integer)) and not isinstance(values, bool):
            if values < 0:
                raise ConstructionError(
                    f"{self.ROLE} vector length must be non-negative, got {values}"
                )
            self._values = np.zeros(int(values), dtype=np.float64)
            return

        if isinstance(values, NamedVector):
            values = values._values

        try:
            array = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConstructionError(
                f"Cannot build {self.ROLE} vector from {values!r}: {e}"
            ) from e

        if array.ndim != 1:
            raise ConstructionError(
                f"{self.ROLE} vector values must be one-dimensional, "
                f"got shape {array.shape}"
            )
        self._values = array

    @classmethod
    def zeros(cls, size: int) -> "NamedVector":
        """Create a vector of `size` zeros."""
        return cls(size)

    def _position(self, index) -> int:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise TypeError(
                f"{self.ROLE} vector indices must be integers, "
                f"not {type(index).__name__}"
            )
        size = len(self._values)
        if not -size <= index < size:
            raise OutOfRangeError(
                f"Index {index} out of range for {self.ROLE} vector of length {size}"
            )
        return int(index)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> float:
        return float(self._values[self._position(index)])

    def __setitem__(self, index: int, value: float) -> None:
        self._values[self._position(index)] = float(value)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values.tolist())

    def __eq__(self, other) -> bool:
        if not isinstance(other, NamedVector):
            return NotImplemented
        return type(self) is type(other) and np.array_equal(self._values, other._values)

    # Mutable containers are not hashable
    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values.tolist()})"

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        return np.array(self._values, dtype=dtype, copy=True)

    def __copy__(self) -> "NamedVector":
        return self.copy()

    def __deepcopy__(self, memo) -> "NamedVector":
        return self.copy()

    def copy(self) -> "NamedVector":
        """Return an independent vector holding the same values."""
        return type(self)(self._values.copy())

    def assign(self, other: Union["NamedVector", Sequence[float]]) -> None:
        """Overwrite all values in place.

        Args:
            other: Values to copy; must have exactly this vector's length

        Raises:
            PreconditionError: If the lengths differ
        """
        source = np.asarray(other, dtype=np.float64)
        if source.shape != self._values.shape:
            raise PreconditionError(
                f"Cannot assign {source.size} values to {self.ROLE} vector "
                f"of length {len(self._values)}"
            )
        self._values[:] = source

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the values as a numpy array."""
        return self._values.copy()

    def tolist(self) -> list[float]:
        """Return the values as a list of floats."""
        return self._values.tolist()


class StateVector(NamedVector):
    """Internal variables describing the system's current condition."""
    __slots__ = ()
    ROLE = "state"


class InputVector(NamedVector):
    """External or control variables affecting the system's evolution."""
    __slots__ = ()
    ROLE = "input"


class OutputVector(NamedVector):
    """Directly measurable quantities derived from state and input."""
    __slots__ = ()
    ROLE = "output"


class PredictedOutputVector(NamedVector):
    """Auxiliary quantities that are not measured but worth predicting."""
    __slots__ = ()
    ROLE = "predicted output"


class EventStateVector(NamedVector):
    """Normalized degradation progress, one value per event (1 healthy, 0 failed)."""
    __slots__ = ()
    ROLE = "event state"


def coerce_vector(
    vector_cls: type,
    values: Union[NamedVector, Sequence[float], np.ndarray],
    expected_length: int,
    error_cls: type = PreconditionError,
    context: Optional[str] = None,
) -> NamedVector:
    """Convert `values` into `vector_cls`, checking its length.

    Vectors that already have the right type are returned as-is; anything
    else is copied into a new vector. Lengths are never padded or truncated.

    Args:
        vector_cls: Target vector class
        values: Vector or 1-D numeric sequence
        expected_length: Required number of elements
        error_cls: Exception raised on a length mismatch
        context: Optional prefix for the error message (e.g. the equation name)

    Returns:
        Vector of type `vector_cls` and length `expected_length`
    """
    if isinstance(values, vector_cls):
        vector = values
    else:
        try:
            vector = vector_cls(values)
        except ConstructionError as e:
            raise error_cls(str(e)) from e

    if len(vector) != expected_length:
        prefix = f"{context}: " if context else ""
        raise error_cls(
            f"{prefix}expected {vector_cls.ROLE} vector of length "
            f"{expected_length}, got {len(vector)}"
        )
    return vector


class VariableNames(tuple):
    """Ordered, immutable list of unique variable names.

    Owned by a model definition, it maps each name to a position in the
    vectors of the matching role. Being a tuple, it compares equal to a
    tuple with the same names in the same order.

    Example:
        >>> inputs = VariableNames(["load"], role="input")
        >>> u = InputVector(len(inputs))
        >>> inputs.set(u, "load", 2.0)
        >>> inputs.to_dict(u)
        {'load': 2.0}
    """

    def __new__(
        cls,
        names: Sequence[str] = (),
        role: str = "variable",
        allow_empty: bool = True,
    ):
        if isinstance(names, str):
            raise ConstructionError(
                f"{role} names must be a sequence of strings, not a single string"
            )
        names = tuple(names)

        if not allow_empty and not names:
            raise ConstructionError(f"At least one {role} name is required")

        for name in names:
            if not isinstance(name, str) or not name:
                raise ConstructionError(
                    f"{role} names must be non-empty strings, got {name!r}"
                )

        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConstructionError(f"Duplicate {role} names: {duplicates}")

        instance = super().__new__(cls, names)
        instance._role = role
        instance._positions = {name: i for i, name in enumerate(names)}
        return instance

    def __getnewargs__(self):
        return (tuple(self), self._role)

    @property
    def role(self) -> str:
        return self._role

    def position(self, name: str) -> int:
        """Return the vector position of `name`.

        Raises:
            KeyError: If the name is not declared
        """
        try:
            return self._positions[name]
        except KeyError:
            raise KeyError(
                f"Unknown {self._role} name '{name}'. Available: {', '.join(self)}"
            ) from None

    def _check(self, vector: NamedVector) -> None:
        if len(vector) != len(self):
            raise PreconditionError(
                f"{self._role} vector has length {len(vector)}, "
                f"expected {len(self)} ({', '.join(self)})"
            )

    def get(self, vector: NamedVector, name: str) -> float:
        """Read the value stored under `name`."""
        self._check(vector)
        return vector[self.position(name)]

    def set(self, vector: NamedVector, name: str, value: float) -> None:
        """Write `value` under `name`."""
        self._check(vector)
        vector[self.position(name)] = value

    def to_dict(self, vector: NamedVector) -> dict[str, float]:
        """Map each name to its value in `vector`."""
        self._check(vector)
        return dict(zip(self, vector))

    def from_mapping(self, vector_cls: type, values: Mapping[str, float]) -> NamedVector:
        """Build a vector from a name -> value mapping.

        Every declared name must be present; extra keys are rejected too so
        misspelled names do not pass silently.

        Raises:
            PreconditionError: On missing or unknown names
        """
        missing = [name for name in self if name not in values]
        unknown = sorted(set(values) - set(self))
        if missing or unknown:
            raise PreconditionError(
                f"Cannot build {self._role} vector: "
                f"missing={missing}, unknown={unknown}"
            )
        return vector_cls([values[name] for name in self])
