"""
Tests for fixed-length vectors and variable name lists.
"""

import copy

import numpy as np
import pytest

from prognostics.exceptions import (
    ConstructionError,
    OutOfRangeError,
    PreconditionError,
)
from prognostics.models.vectors import (
    InputVector,
    NamedVector,
    OutputVector,
    PredictedOutputVector,
    StateVector,
    VariableNames,
    coerce_vector,
)


class TestNamedVector:
    """Construction, indexing and value semantics."""

    def test_construct_from_length_gives_zeros(self):
        v = StateVector(3)
        assert len(v) == 3
        assert v.tolist() == [0.0, 0.0, 0.0]

    def test_construct_from_values(self):
        v = InputVector([1, 2.5])
        assert v[0] == 1.0
        assert v[1] == 2.5
        assert isinstance(v[0], float)

    def test_empty_vector(self):
        assert len(PredictedOutputVector(0)) == 0
        assert len(PredictedOutputVector([])) == 0

    def test_negative_length_rejected(self):
        with pytest.raises(ConstructionError):
            StateVector(-1)

    def test_non_flat_values_rejected(self):
        with pytest.raises(ConstructionError):
            StateVector([[1.0, 2.0], [3.0, 4.0]])

    def test_non_numeric_values_rejected(self):
        with pytest.raises(ConstructionError):
            StateVector(["a", "b"])

    def test_write_by_position(self):
        v = StateVector(2)
        v[1] = 7
        assert v.tolist() == [0.0, 7.0]

    def test_negative_index_within_length(self):
        v = StateVector([1.0, 2.0])
        assert v[-1] == 2.0

    @pytest.mark.parametrize("index", [2, 10, -3])
    def test_out_of_range_read(self, index):
        v = StateVector([1.0, 2.0])
        with pytest.raises(OutOfRangeError):
            v[index]

    def test_out_of_range_write(self):
        v = StateVector(2)
        with pytest.raises(IndexError):
            v[2] = 1.0

    def test_slices_not_supported(self):
        v = StateVector(3)
        with pytest.raises(TypeError):
            v[0:2]

    def test_copy_is_independent(self):
        original = StateVector([1.0, 2.0])
        for duplicate in (original.copy(), copy.copy(original), copy.deepcopy(original)):
            duplicate[0] = 99.0
            assert original[0] == 1.0
            assert type(duplicate) is StateVector

    def test_construct_from_vector_copies(self):
        original = StateVector([1.0, 2.0])
        duplicate = StateVector(original)
        duplicate[1] = 0.0
        assert original[1] == 2.0

    def test_assign_overwrites_in_place(self):
        v = StateVector([1.0, 2.0])
        v.assign([3.0, 4.0])
        assert v.tolist() == [3.0, 4.0]

    def test_assign_rejects_other_length(self):
        v = StateVector([1.0, 2.0])
        with pytest.raises(PreconditionError):
            v.assign([1.0, 2.0, 3.0])
        assert len(v) == 2

    def test_numpy_view_is_a_copy(self):
        v = StateVector([1.0, 2.0])
        array = np.asarray(v)
        array[0] = 50.0
        assert v[0] == 1.0
        v.to_numpy()[1] = 50.0
        assert v[1] == 2.0

    def test_equality_compares_role_and_values(self):
        assert StateVector([1.0]) == StateVector([1.0])
        assert StateVector([1.0]) != StateVector([2.0])
        assert StateVector([1.0]) != InputVector([1.0])
        assert StateVector([1.0]) != [1.0]

    def test_zeros_factory_keeps_role(self):
        v = OutputVector.zeros(2)
        assert type(v) is OutputVector
        assert len(v) == 2

    def test_repr(self):
        assert repr(StateVector([1.0, 2.0])) == "StateVector([1.0, 2.0])"

    def test_no_attribute_to_swap_storage(self):
        v = NamedVector(1)
        with pytest.raises(AttributeError):
            v.names = ["a"]


class TestCoerceVector:

    def test_passes_matching_vector_through(self):
        v = StateVector(2)
        assert coerce_vector(StateVector, v, 2) is v

    def test_converts_sequences(self):
        v = coerce_vector(InputVector, [1.0], 1)
        assert isinstance(v, InputVector)

    def test_length_mismatch_is_never_padded(self):
        with pytest.raises(PreconditionError, match="expected state vector of length 3"):
            coerce_vector(StateVector, [1.0, 2.0], 3)


class TestVariableNames:
    """Symbolic access by name through the model-owned name list."""

    def test_positions_follow_declaration_order(self):
        names = VariableNames(["charge", "resistance"], role="state")
        assert names.position("charge") == 0
        assert names.position("resistance") == 1
        assert names == ("charge", "resistance")

    def test_duplicate_names_rejected(self):
        with pytest.raises(ConstructionError, match="Duplicate"):
            VariableNames(["a", "b", "a"])

    def test_empty_or_non_string_names_rejected(self):
        with pytest.raises(ConstructionError):
            VariableNames(["a", ""])
        with pytest.raises(ConstructionError):
            VariableNames(["a", 3])
        with pytest.raises(ConstructionError):
            VariableNames("abc")

    def test_empty_list_only_when_allowed(self):
        assert len(VariableNames([])) == 0
        with pytest.raises(ConstructionError):
            VariableNames([], role="input", allow_empty=False)

    def test_get_and_set(self):
        names = VariableNames(["load", "temperature"], role="input")
        u = InputVector(2)
        names.set(u, "temperature", 25.0)
        assert names.get(u, "temperature") == 25.0
        assert u[1] == 25.0

    def test_unknown_name(self):
        names = VariableNames(["load"], role="input")
        with pytest.raises(KeyError, match="Unknown input name 'lod'"):
            names.position("lod")

    def test_length_mismatch_with_vector(self):
        names = VariableNames(["a", "b"])
        with pytest.raises(PreconditionError):
            names.get(StateVector(3), "a")

    def test_to_dict_and_from_mapping(self):
        names = VariableNames(["charge", "resistance"], role="state")
        x = names.from_mapping(StateVector, {"resistance": 0.05, "charge": 2.0})
        assert x.tolist() == [2.0, 0.05]
        assert names.to_dict(x) == {"charge": 2.0, "resistance": 0.05}

    def test_from_mapping_rejects_missing_and_unknown(self):
        names = VariableNames(["charge", "resistance"], role="state")
        with pytest.raises(PreconditionError, match="missing=\\['resistance'\\]"):
            names.from_mapping(StateVector, {"charge": 1.0})
        with pytest.raises(PreconditionError, match="unknown=\\['voltage'\\]"):
            names.from_mapping(StateVector, {"charge": 1.0, "resistance": 0.1, "voltage": 3.0})
