#!/usr/bin/env python3
"""
ORF extension for profile hits.

A profile hit marks part of a coding region. The extender widens it in the
hit's reading frame: rightward to the first stop codon and leftward to a
start codon chosen by a pluggable strategy. The left scan never crosses an
in-frame stop, so every candidate start yields an open frame.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type

from rnamatch.exceptions import ConfigurationError
from rnamatch.models.location import Location
from rnamatch.utils.sequence import stop_codons, translate_dna, DEFAULT_GENETIC_CODE

logger = logging.getLogger("rnamatch.pipelines.orf")

START_CODONS = ('atg', 'gtg', 'ttg')

# (position, codon) pairs, nearest to the hit first
StartList = List[Tuple[int, str]]


class StartStrategy(ABC):
    """Picks one start codon from the candidates upstream of a hit"""
    name = ""

    @abstractmethod
    def choose(self, starts: StartList) -> Optional[int]:
        """Return the position of the chosen start, or None if there is none"""


class NearestStartStrategy(StartStrategy):
    """The first start at or upstream of the hit"""
    name = "nearest"

    def choose(self, starts: StartList) -> Optional[int]:
        return starts[0][0] if starts else None


class LongestStartStrategy(StartStrategy):
    """The start farthest upstream, giving the longest protein"""
    name = "longest"

    def choose(self, starts: StartList) -> Optional[int]:
        return starts[-1][0] if starts else None


class BiasedStartStrategy(StartStrategy):
    """The nearest ATG, else the nearest GTG, else the nearest TTG"""
    name = "biased"

    def choose(self, starts: StartList) -> Optional[int]:
        for preferred in START_CODONS:
            for position, codon in starts:
                if codon == preferred:
                    return position
        return None


STRATEGIES: Dict[str, Type[StartStrategy]] = {
    NearestStartStrategy.name: NearestStartStrategy,
    LongestStartStrategy.name: LongestStartStrategy,
    BiasedStartStrategy.name: BiasedStartStrategy,
}


class OrfExtender:
    """Extends forward-frame hit locations to complete start..stop ORFs"""

    def __init__(self, strategy: StartStrategy, genetic_code: int = DEFAULT_GENETIC_CODE):
        self.strategy = strategy
        self.genetic_code = genetic_code
        self.stops = stop_codons(genetic_code)

    def extend(self, loc: Location, text: str) -> Optional[Location]:
        """Extend a location to a start and a stop codon

        Args:
            loc: Hit location on the plus strand of ``text``
            text: Nucleotide text of the working sequence

        Returns:
            The extended location (stop codon included), or None if no stop
            follows the hit or no start precedes it
        """
        right = self._find_stop(loc, text)
        if right is None:
            logger.debug(f"No stop codon found after {loc}")
            return None
        start = self.strategy.choose(self._find_starts(loc, text))
        if start is None:
            logger.debug(f"No start codon found before {loc}")
            return None
        return Location(loc.sequence_id, start, right, loc.strand)

    def _find_stop(self, loc: Location, text: str) -> Optional[int]:
        codons = max(loc.length // 3, 1)
        pos = loc.left + 3 * (codons - 1)
        while pos + 2 <= len(text):
            if text[pos - 1:pos + 2].lower() in self.stops:
                return pos + 2
            pos += 3
        return None

    def _find_starts(self, loc: Location, text: str) -> StartList:
        starts = []
        pos = loc.left
        while pos >= 1:
            codon = text[pos - 1:pos + 2].lower()
            if codon in self.stops:
                break
            if codon in START_CODONS:
                starts.append((pos, codon))
            pos -= 3
        return starts

    def translate(self, text: str, offset: int, length: int) -> str:
        """Translate ``length`` bases of ``text`` starting at 1-based ``offset``

        The first residue is always M.
        """
        return translate_dna(text[offset - 1:offset - 1 + length], self.genetic_code)


def create_extender(name: str, genetic_code: int = DEFAULT_GENETIC_CODE) -> OrfExtender:
    """Build an extender for a start strategy name

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    try:
        strategy_class = STRATEGIES[name.lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown start-finding algorithm {name}",
                                 {'valid': sorted(STRATEGIES)})
    return OrfExtender(strategy_class(), genetic_code)
