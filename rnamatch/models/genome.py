#!/usr/bin/env python3
"""
Genome model loaded from GTO (genome typed object) JSON files.

Only the parts needed for matching and verification are kept: contig DNA,
the genetic code, and the features with their locations and protein
translations.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Iterator

from rnamatch.exceptions import DataError, FileOperationError
from rnamatch.utils.sequence import stop_codons, DEFAULT_GENETIC_CODE
from .location import Location

logger = logging.getLogger("rnamatch.models.genome")

PROKARYOTIC_DOMAINS = ('Bacteria', 'Archaea')


@dataclass
class Feature:
    """An annotated genome feature"""
    id: str
    type: str
    location: Location
    function: str = ""
    protein_translation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Feature':
        """Build a feature from its GTO form

        GTO locations are lists of ``[contig, begin, strand, length]``
        segments; the feature location is the span of all segments.
        """
        segments = data.get('location') or []
        if not segments:
            raise DataError(f"Feature {data.get('id')} has no location")
        loc = None
        for contig, begin, strand, length in segments:
            end = begin + length - 1 if strand == '+' else begin - length + 1
            segment = Location.create(contig, strand, begin, end)
            loc = segment if loc is None else loc.merge(segment)
        return cls(
            id=data['id'],
            type=data.get('type', ''),
            location=loc,
            function=data.get('function', ''),
            protein_translation=data.get('protein_translation')
        )


@dataclass
class Genome:
    """Genome with contigs and annotated features"""
    id: str
    name: str
    domain: str = 'Bacteria'
    genetic_code: int = DEFAULT_GENETIC_CODE
    contigs: Dict[str, str] = field(default_factory=dict)
    features: Dict[str, Feature] = field(default_factory=dict)

    def __post_init__(self):
        self._contig_features: Dict[str, List[Feature]] = {}
        for feature in self.features.values():
            self._contig_features.setdefault(feature.location.sequence_id, []).append(feature)
        for feature_list in self._contig_features.values():
            feature_list.sort(key=lambda f: f.location.left)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Genome':
        try:
            contigs = {c['id']: c['dna'].lower() for c in data.get('contigs', [])}
            features = [Feature.from_dict(f) for f in data.get('features', [])]
            return cls(
                id=data['id'],
                name=data.get('scientific_name', ''),
                domain=data.get('domain', 'Bacteria'),
                genetic_code=int(data.get('genetic_code', DEFAULT_GENETIC_CODE)),
                contigs=contigs,
                features={f.id: f for f in features}
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Invalid genome data: {str(e)}") from e

    @classmethod
    def load(cls, path: str) -> 'Genome':
        """Load a genome from a GTO file

        Raises:
            FileOperationError: If the file cannot be read
            DataError: If the content is not a valid genome
        """
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except OSError as e:
            raise FileOperationError(f"Cannot read genome file {path}: {str(e)}") from e
        except json.JSONDecodeError as e:
            raise DataError(f"Genome file {path} is not valid JSON: {str(e)}") from e
        genome = cls.from_dict(data)
        logger.debug(f"Loaded genome {genome} with {len(genome.contigs)} contigs "
                     f"and {len(genome.features)} features")
        return genome

    @property
    def is_prokaryotic(self) -> bool:
        return self.domain in PROKARYOTIC_DOMAINS

    def contig_length(self, contig_id: str) -> int:
        try:
            return len(self.contigs[contig_id])
        except KeyError:
            raise DataError(f"Contig {contig_id} not found in genome {self.id}")

    def get_dna(self, loc: Location) -> str:
        """Nucleotides for a location in this genome"""
        if loc.sequence_id not in self.contigs:
            raise DataError(f"Contig {loc.sequence_id} not found in genome {self.id}")
        return loc.get_dna(self.contigs[loc.sequence_id])

    def get_feature(self, feature_id: str) -> Optional[Feature]:
        return self.features.get(feature_id)

    def features_in_region(self, loc: Location) -> Iterator[Feature]:
        """Features on the location's contig whose span overlaps it (either strand)"""
        for feature in self._contig_features.get(loc.sequence_id, []):
            if feature.location.left > loc.right:
                break
            if feature.location.overlaps(loc):
                yield feature

    def extend_to_orf(self, loc: Location) -> Location:
        """Widen a coding location to its surrounding open reading frame

        Upstream the ORF starts just after the nearest in-frame stop (or at the
        first whole codon of the contig). Downstream it ends with the first
        in-frame stop at or past the location's last codon (or the last whole
        codon of the contig).
        """
        contig = self.contigs.get(loc.sequence_id)
        if contig is None:
            raise DataError(f"Contig {loc.sequence_id} not found in genome {self.id}")
        seq_len = len(contig)
        if loc.strand == '-':
            forward = loc.converse(seq_len)
            text = Location(loc.sequence_id, 1, seq_len, '-').get_dna(contig)
        else:
            forward = loc
            text = contig
        stops = stop_codons(self.genetic_code)
        left = forward.left
        pos = forward.left - 3
        while pos >= 1:
            if text[pos - 1:pos + 2] in stops:
                break
            left = pos
            pos -= 3
        codons = max(forward.length // 3, 1)
        right = forward.left + 3 * (codons - 1) + 2
        pos = right - 2
        while pos + 2 <= seq_len:
            right = pos + 2
            if text[pos - 1:pos + 2] in stops:
                break
            pos += 3
        right = max(right, left)
        result = Location(loc.sequence_id, left, right, '+')
        return result.converse(seq_len) if loc.strand == '-' else result

    def __str__(self) -> str:
        return f"{self.id} ({self.name})"
