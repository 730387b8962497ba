#!/usr/bin/env python3
"""
Tests for the Location value type
"""
import pytest

from rnamatch.models.location import Location, FAR_AWAY


class TestLocationBasics:
    """Construction, parsing and string form"""

    def test_invalid_strand_rejected(self):
        with pytest.raises(ValueError):
            Location("c1", 1, 10, '*')

    def test_left_after_right_rejected(self):
        with pytest.raises(ValueError):
            Location("c1", 10, 5, '+')

    def test_create_orders_minus_strand_points(self):
        loc = Location.create("c1", '-', 200, 101)
        assert loc.left == 101
        assert loc.right == 200
        assert loc.begin == 200
        assert loc.end == 101
        assert loc.length == 100

    def test_string_form(self):
        assert str(Location("559292.28.con.0003", 177450, 177956, '-')) == "559292.28.con.0003_177956-507"
        assert str(Location("c1", 5, 14, '+')) == "c1_5+10"

    @pytest.mark.parametrize("loc", [
        Location("559292.28.con.0003", 177450, 177956, '-'),
        Location("NODE_1_length_500", 1, 1, '+'),
        Location("a_b_c", 40, 99, '+'),
    ])
    def test_parse_round_trip(self, loc):
        assert Location.parse(str(loc)) == loc

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            Location.parse("contig:1-20")
        with pytest.raises(ValueError):
            Location.parse("c1_10+0")

    def test_locations_are_hashable_values(self):
        loc = Location("c1", 1, 10)
        assert {loc: 'x'}[Location("c1", 1, 10, '+')] == 'x'


class TestLocationGeometry:
    """Containment, distance, merge, expand, converse"""

    def test_contains_and_overlaps(self):
        outer = Location("c1", 10, 100)
        assert outer.contains(Location("c1", 10, 100, '-'))
        assert outer.contains(Location("c1", 20, 30))
        assert not outer.contains(Location("c1", 5, 30))
        assert not outer.contains(Location("c2", 20, 30))
        assert outer.overlaps(Location("c1", 100, 120))
        assert not outer.overlaps(Location("c1", 101, 120))
        assert outer.contains_position(55)

    def test_distance(self):
        a = Location("c1", 10, 72)
        assert a.distance(Location("c1", 113, 175)) == 40
        assert Location("c1", 113, 175).distance(a) == 40
        assert a.distance(Location("c1", 73, 80)) == 0
        assert a.distance(Location("c1", 50, 80)) == 0
        assert a.distance(Location("c2", 1, 5)) == FAR_AWAY

    def test_merge_returns_new_union(self):
        a = Location("c1", 10, 72, '+')
        b = Location("c1", 113, 175, '-')
        merged = a.merge(b)
        assert merged == Location("c1", 10, 175, '+')
        assert a == Location("c1", 10, 72, '+')

    def test_merge_different_sequences(self):
        with pytest.raises(ValueError):
            Location("c1", 1, 5).merge(Location("c2", 1, 5))

    @pytest.mark.parametrize("left,right,pad,seq_len", [
        (1, 10, 50, 100),
        (95, 100, 50, 100),
        (1, 100, 5, 100),
        (40, 60, 0, 100),
        (40, 60, 10, 100),
    ])
    def test_expand_stays_in_bounds(self, left, right, pad, seq_len):
        loc = Location("c1", left, right, '-').expand(pad, pad, seq_len)
        assert loc.left >= 1
        assert loc.right <= seq_len
        assert loc.left == max(1, left - pad)
        assert loc.right == min(seq_len, right + pad)
        assert loc.strand == '-'

    def test_converse(self):
        loc = Location("c1", 3, 5, '+')
        flipped = loc.converse(10)
        assert flipped == Location("c1", 6, 8, '-')
        assert flipped.converse(10) == loc

    def test_get_dna(self):
        text = "aaacccgggttt"
        assert Location("c1", 4, 9, '+').get_dna(text) == "cccggg"
        assert Location("c1", 1, 6, '-').get_dna(text) == "gggttt"
