# =============================================================================
# test_frame.py - Scope and Frame Model Tests
# =============================================================================
# Tests for slot allocation and name resolution across nested frames.
#
# Test coverage includes:
#   - Slot uniqueness and stability
#   - Outer-before-inner lookup precedence
#   - Snapshot semantics of push()
#   - Independent copies for function frames
#   - Declared function registry
# =============================================================================

import pytest
from seic.frame import Frame, ParseState


# =============================================================================
# Slot Allocation Tests
# =============================================================================

class TestSlotAllocation:
    """Test get_slot on a single frame."""

    def test_first_slot_is_zero(self):
        assert Frame().get_slot("x") == 0

    def test_repeated_query_is_stable(self):
        frame = Frame()
        assert frame.get_slot("x") == frame.get_slot("x")
        assert frame.slot_count == 1

    def test_distinct_names_distinct_slots(self):
        frame = Frame()
        slots = [frame.get_slot(name) for name in ("a", "b", "c")]
        assert slots == [0, 1, 2]
        assert frame.slot_count == 3

    def test_lookup_does_not_allocate(self):
        frame = Frame()
        assert frame.lookup("x") is None
        assert frame.slot_count == 0

    def test_parse_state_allocate(self):
        state = ParseState()
        assert [state.allocate() for _ in range(3)] == [0, 1, 2]


# =============================================================================
# Nested Frame Tests
# =============================================================================

class TestNestedFrames:
    """Test push() and resolution through enclosing layers."""

    def test_outer_name_visible_inside(self):
        root = Frame()
        root.get_slot("i")
        inner = root.push()
        assert inner.get_slot("i") == 0
        assert inner.slot_count == 1

    def test_inner_name_invisible_outside(self):
        root = Frame()
        inner = root.push()
        assert inner.get_slot("j") == 0
        assert root.lookup("j") is None

    def test_counter_shared(self):
        """Root i->0, inner j->1, then root j->2."""
        root = Frame()
        assert root.get_slot("i") == 0
        inner = root.push()
        assert inner.get_slot("i") == 0
        assert inner.get_slot("j") == 1
        assert root.get_slot("j") == 2

    def test_siblings_never_share_slots(self):
        root = Frame()
        first = root.push()
        second = root.push()
        assert first.get_slot("t") != second.get_slot("t")

    def test_push_is_snapshot(self):
        """Names bound in the parent after push are not seen by the child."""
        root = Frame()
        inner = root.push()
        root.get_slot("late")
        assert inner.lookup("late") is None

    def test_layers_are_read_only(self):
        root = Frame()
        root.get_slot("x")
        inner = root.push()
        with pytest.raises(TypeError):
            inner.layers[0]["y"] = 5

    def test_enclosing_layer_wins(self):
        """Outer layers are searched before the open layer."""
        root = Frame()
        root.get_slot("x")
        inner = root.push()
        inner.top["x"] = 99
        assert inner.get_slot("x") == 0


# =============================================================================
# Copy and Function Registry Tests
# =============================================================================

class TestCopyAndFunctions:
    """Test copy() and the declared function table."""

    def test_copy_has_independent_top(self):
        frame = Frame()
        frame.get_slot("a")
        clone = frame.copy()
        clone.get_slot("b")
        assert frame.lookup("b") is None
        assert clone.lookup("a") == 0

    def test_copy_shares_counter(self):
        frame = Frame()
        clone = frame.copy()
        frame.get_slot("a")
        assert clone.get_slot("b") == 1

    def test_declare_and_lookup_function(self):
        root = Frame()
        inner = root.push()
        inner.declare_function("f", 2)
        assert root.lookup_function("f") == 2
        assert root.lookup_function("g") is None

    def test_parses_do_not_share_state(self):
        first = Frame()
        first.get_slot("x")
        first.declare_function("f", 0)
        second = Frame()
        assert second.get_slot("y") == 0
        assert second.lookup_function("f") is None
