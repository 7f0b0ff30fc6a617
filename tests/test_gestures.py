"""Tests for the gesture decoder and the direction geometry."""

import pytest

from superhat.core import could_extend, decode_switch_number, gesture_for, resolve, switch_number
from superhat.models import Direction, Panel


@pytest.mark.unit
class TestDirectionGeometry:
    """Test relative pairs and side numbering."""

    @pytest.mark.parametrize("direction", list(Direction))
    def test_relative_pair_excludes_self_and_opposite(self, direction):
        """Test a side's relative pair never holds the side or its opposite."""
        left, right = direction.relative_pair
        assert direction not in (left, right)
        assert direction.opposite not in (left, right)
        assert left != right

    @pytest.mark.parametrize("direction", list(Direction))
    def test_relative_pair_follows_the_clockwise_cycle(self, direction):
        """The right neighbour of a side has that side as its left neighbour."""
        left, right = direction.relative_pair
        assert right.relative_pair[0] is direction
        assert left.relative_pair[1] is direction

    def test_concrete_pairs(self):
        """Test the relative pair of each side."""
        assert Direction.UP.relative_pair == (Direction.LEFT, Direction.RIGHT)
        assert Direction.RIGHT.relative_pair == (Direction.UP, Direction.DOWN)
        assert Direction.DOWN.relative_pair == (Direction.RIGHT, Direction.LEFT)
        assert Direction.LEFT.relative_pair == (Direction.DOWN, Direction.UP)

    def test_side_bases(self):
        """Test the first switch index of each side."""
        assert [d.side_base for d in Direction] == [0, 5, 10, 15]

    def test_binding_order(self):
        """Test rebinding walks Up, Right, Down, Left."""
        assert Direction.UP.next_in_binding_order() is Direction.RIGHT
        assert Direction.DOWN.next_in_binding_order() is Direction.LEFT
        assert Direction.LEFT.next_in_binding_order() is None

    def test_panel_for_direction(self):
        """Test only Left and Right select a panel."""
        assert Panel.for_direction(Direction.LEFT) is Panel.A
        assert Panel.for_direction(Direction.RIGHT) is Panel.B
        assert Panel.for_direction(Direction.UP) is None
        assert Panel.for_direction(Direction.DOWN) is None


@pytest.mark.unit
class TestResolve:
    """Test tap buffer resolution."""

    @pytest.mark.parametrize("side", list(Direction))
    def test_single_tap_on_side_is_middle(self, side):
        """Test tapping the side again selects the middle switch."""
        assert resolve(side, [side]) == 2

    @pytest.mark.parametrize("side", list(Direction))
    def test_valid_buffers_map_to_distinct_positions(self, side):
        """Test the five gestures of a side reach five different positions."""
        left, right = side.relative_pair
        buffers = [(left, left), (left, side), (side,), (right, side), (right, right)]
        positions = [resolve(side, buf) for buf in buffers]
        assert positions == [0, 1, 2, 3, 4]

    def test_incomplete_buffers_do_not_resolve(self):
        """Test a single relative tap does not resolve yet."""
        assert resolve(Direction.UP, []) is None
        assert resolve(Direction.UP, [Direction.LEFT]) is None
        assert resolve(Direction.UP, [Direction.RIGHT]) is None

    def test_opposite_never_resolves(self):
        """Test tapping the opposite direction never resolves."""
        assert resolve(Direction.UP, [Direction.DOWN]) is None
        assert resolve(Direction.UP, [Direction.LEFT, Direction.RIGHT]) is None

    @pytest.mark.parametrize("side", list(Direction))
    @pytest.mark.parametrize("position", range(5))
    def test_gesture_for_is_the_inverse_of_resolve(self, side, position):
        """Test gesture_for returns the taps resolve maps back."""
        assert resolve(side, gesture_for(side, position)) == position

    def test_gesture_for_rejects_bad_position(self):
        """Test gesture_for rejects positions outside 0-4."""
        with pytest.raises(ValueError):
            gesture_for(Direction.UP, 5)


@pytest.mark.unit
class TestCouldExtend:
    """Test prefix detection."""

    @pytest.mark.parametrize("side", list(Direction))
    def test_valid_prefixes(self, side):
        """Test buffers that can still become a gesture."""
        left, right = side.relative_pair
        assert could_extend(side, [])
        assert could_extend(side, [side])
        assert could_extend(side, [left])
        assert could_extend(side, [right])

    @pytest.mark.parametrize("side", list(Direction))
    def test_opposite_is_a_dead_end(self, side):
        """Test the opposite direction can never be extended."""
        assert not could_extend(side, [side.opposite])

    @pytest.mark.parametrize("side", list(Direction))
    def test_dead_ends_never_resolve_with_one_more_tap(self, side):
        """A buffer that can't extend stays unresolvable whatever comes next."""
        candidates = [[a] for a in Direction] + [[a, b] for a in Direction for b in Direction]
        for buffer in candidates:
            if resolve(side, buffer) is None and not could_extend(side, buffer):
                for tap in Direction:
                    assert resolve(side, [*buffer, tap]) is None

    def test_mixed_two_tap_buffer_is_a_dead_end(self):
        """Test a left tap followed by a right tap is a dead end."""
        assert not could_extend(Direction.UP, [Direction.LEFT, Direction.RIGHT])
        assert not could_extend(Direction.UP, [Direction.RIGHT, Direction.LEFT])


@pytest.mark.unit
class TestSwitchNumbers:
    """Test global switch numbering."""

    def test_examples(self):
        """Test switch numbers for known panel, side and position triples."""
        assert switch_number(Panel.A, Direction.UP, 0) == 1
        assert switch_number(Panel.A, Direction.UP, 2) == 3
        assert switch_number(Panel.A, Direction.LEFT, 0) == 16
        assert switch_number(Panel.B, Direction.RIGHT, 2) == 28
        assert switch_number(Panel.B, Direction.LEFT, 4) == 40

    def test_every_number_decodes_back(self):
        """Test every switch number decodes to the triple that builds it."""
        seen = set()
        for panel in Panel:
            for side in Direction:
                for position in range(5):
                    number = switch_number(panel, side, position)
                    assert 1 <= number <= 40
                    assert decode_switch_number(number) == (panel, side, position)
                    seen.add(number)
        assert seen == set(range(1, 41))

    @pytest.mark.parametrize("number", [0, 41, -3])
    def test_decode_rejects_out_of_range(self, number):
        """Test decoding rejects numbers outside 1-40."""
        with pytest.raises(ValueError):
            decode_switch_number(number)
