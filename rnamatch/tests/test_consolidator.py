#!/usr/bin/env python3
"""
Tests for strand consolidation of profile hits
"""
from rnamatch.models.location import Location
from rnamatch.pipelines.consolidator import consolidate_hits, strand_vote
from rnamatch.utils.sequence import reverse_complement
from .conftest import make_hit

TEXT = "ACGTACGTTTGGCCAAGGTTCCAAGGTTCC"


class TestConsolidateHits:

    def test_forward_majority_keeps_forward_hits_unchanged(self):
        hits = [make_hit("s1", 30, 1, 9, '+'), make_hit("s1", 30, 10, 18, '+'),
                make_hit("s1", 30, 4, 12, '-')]
        kept, text = consolidate_hits(hits, TEXT)
        assert text == TEXT.lower()
        assert [h.loc for h in kept] == [Location("s1", 1, 9, '+'), Location("s1", 10, 18, '+')]
        assert all(h.origin_length == 30 for h in kept)

    def test_tie_resolves_to_forward(self):
        hits = [make_hit("s1", 30, 1, 9, '+'), make_hit("s1", 30, 4, 12, '-')]
        assert strand_vote(hits) == 0
        kept, text = consolidate_hits(hits, TEXT)
        assert text == TEXT.lower()
        assert len(kept) == 1
        assert kept[0].loc.strand == '+'

    def test_reverse_majority_flips_text_and_locations(self):
        hits = [make_hit("s1", 30, 4, 12, '-', query_id="A"),
                make_hit("s1", 30, 20, 28, '-', query_id="B"),
                make_hit("s1", 30, 1, 9, '+', query_id="C")]
        kept, text = consolidate_hits(hits, TEXT)
        assert text == reverse_complement(TEXT.lower())
        assert [h.profile_id for h in kept] == ["A", "B"]
        assert kept[0].loc == Location("s1", 19, 27, '+')
        assert kept[1].loc == Location("s1", 3, 11, '+')
        # The converted location reads the same bases as the original hit
        original = Location("s1", 4, 12, '-').get_dna(TEXT.lower())
        assert kept[0].loc.get_dna(text) == original

    def test_no_hits(self):
        kept, text = consolidate_hits([], TEXT)
        assert kept == []
        assert text == TEXT.lower()
