#!/usr/bin/env python3
"""
BlastXmlParser - A parser for BLAST XML result files

Turns the XML report written with ``-outfmt 5`` into AlignmentHit records.
Works for blastn (fragment against genome) and tblastn (profile against RNA)
reports, one Iteration per query.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from rnamatch.exceptions import AlignmentError
from rnamatch.models.hits import AlignmentHit
from rnamatch.models.location import Location

# Hit ids assigned by makeblastdb when sequence ids are not parsed
ORDINAL_ID_PREFIX = "gnl|BL_ORD_ID"


class BlastXmlParser:
    """
    Parser for BLAST XML result files.

    Every HSP becomes one AlignmentHit. Query and subject ids are the first
    word of the FASTA title, so they match the ids of the sequences that
    were submitted.
    """

    def __init__(self, logger=None):
        """Initialize the parser with optional logger

        Args:
            logger: Logger instance for output
        """
        self.logger = logger or logging.getLogger("rnamatch.blast.parser")

    def parse(self, file_path: str) -> List[AlignmentHit]:
        """Parse a BLAST XML result file

        Args:
            file_path: Path to BLAST XML file

        Returns:
            List of hits in report order

        Raises:
            AlignmentError: If the file cannot be read or parsed
        """
        try:
            tree = ET.parse(file_path)
        except ET.ParseError as e:
            raise AlignmentError(f"XML parsing error for {file_path}: {str(e)}") from e
        except OSError as e:
            raise AlignmentError(f"Cannot read BLAST output {file_path}: {str(e)}") from e
        return self.parse_root(tree.getroot())

    def parse_string(self, text: str) -> List[AlignmentHit]:
        """Parse BLAST XML held in memory"""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise AlignmentError(f"XML parsing error: {str(e)}") from e
        return self.parse_root(root)

    def parse_root(self, root: ET.Element) -> List[AlignmentHit]:
        hits = []
        iterations = root.findall(".//Iteration")
        for iteration in iterations:
            query_def = self._safe_find_text(iteration, "./Iteration_query-def")
            query_id = self._first_word(query_def) or self._safe_find_text(iteration, "./Iteration_query-ID")
            query_len = self._safe_find_int(iteration, "./Iteration_query-len")
            for hit_elem in iteration.findall("./Iteration_hits/Hit"):
                hits.extend(self._extract_hsps(hit_elem, query_id, query_len))
        self.logger.debug(f"Parsed {len(hits)} hits from {len(iterations)} queries")
        return hits

    def _extract_hsps(self, hit_elem: ET.Element, query_id: str, query_len: int) -> List[AlignmentHit]:
        hit_id = self._safe_find_text(hit_elem, "./Hit_id")
        hit_def = self._safe_find_text(hit_elem, "./Hit_def")
        hit_len = self._safe_find_int(hit_elem, "./Hit_len")

        if hit_id.startswith(ORDINAL_ID_PREFIX) or not hit_id:
            subject_id = self._first_word(hit_def)
            subject_def = hit_def[len(subject_id):].strip()
        else:
            subject_id = hit_id
            subject_def = hit_def

        hsps = []
        for hsp_elem in hit_elem.findall("./Hit_hsps/Hsp"):
            query_from = self._safe_find_int(hsp_elem, "./Hsp_query-from")
            query_to = self._safe_find_int(hsp_elem, "./Hsp_query-to")
            hit_from = self._safe_find_int(hsp_elem, "./Hsp_hit-from")
            hit_to = self._safe_find_int(hsp_elem, "./Hsp_hit-to")
            identity = self._safe_find_int(hsp_elem, "./Hsp_identity")
            align_len = self._safe_find_int(hsp_elem, "./Hsp_align-len")

            hit_frame = self._safe_find_int(hsp_elem, "./Hsp_hit-frame")
            subject_strand = '-' if hit_frame < 0 or hit_from > hit_to else '+'
            query_frame = self._safe_find_int(hsp_elem, "./Hsp_query-frame")
            query_strand = '-' if query_frame < 0 or query_from > query_to else '+'

            hsps.append(AlignmentHit(
                query_id=query_id,
                query_len=query_len,
                query_loc=Location.create(query_id, query_strand, query_from, query_to),
                subject_id=subject_id,
                subject_len=hit_len,
                subject_loc=Location.create(subject_id, subject_strand, hit_from, hit_to),
                subject_def=subject_def,
                evalue=self._safe_find_float(hsp_elem, "./Hsp_evalue", 999.0),
                percent_identity=(identity * 100.0 / align_len) if align_len else 0.0,
                bit_score=self._safe_find_float(hsp_elem, "./Hsp_bit-score"),
                identities=identity,
                align_len=align_len
            ))
        return hsps

    @staticmethod
    def _first_word(text: str) -> str:
        parts = text.split(None, 1)
        return parts[0] if parts else ""

    def _safe_find_text(self, element: ET.Element, xpath: str, default: str = "") -> str:
        result = element.find(xpath)
        if result is not None and result.text:
            return result.text.strip()
        return default

    def _safe_find_int(self, element: ET.Element, xpath: str, default: int = 0) -> int:
        result = element.find(xpath)
        if result is not None and result.text:
            try:
                return int(result.text.strip())
            except ValueError:
                self.logger.warning(f"Non-integer value {result.text!r} for {xpath}")
        return default

    def _safe_find_float(self, element: ET.Element, xpath: str, default: float = 0.0) -> float:
        result = element.find(xpath)
        if result is not None and result.text:
            try:
                return float(result.text.strip())
            except ValueError:
                self.logger.warning(f"Non-numeric value {result.text!r} for {xpath}")
        return default
