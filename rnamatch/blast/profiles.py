#!/usr/bin/env python3
"""
Protein profile searches.

A profile directory holds one PSSM (``*.smp``) per protein family. Profiling
a nucleotide database finds the regions of each sequence that code for a
profiled protein.
"""
import os
import glob
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List

from rnamatch.exceptions import FileOperationError
from rnamatch.models.hits import AlignmentHit
from .aligner import BlastAligner, BlastParameters

logger = logging.getLogger("rnamatch.blast.profiles")

PROFILE_SUFFIX = ".smp"


def group_by_subject(hits: List[AlignmentHit]) -> Dict[str, List[AlignmentHit]]:
    """Group hits by subject id, keeping first-seen order"""
    grouped: Dict[str, List[AlignmentHit]] = {}
    for hit in hits:
        grouped.setdefault(hit.subject_id, []).append(hit)
    return grouped


class ProfileSearcher(ABC):
    """Finds profile hits in a nucleotide database"""

    @abstractmethod
    def profile(self, database: str, params: BlastParameters) -> Dict[str, List[AlignmentHit]]:
        """Search every profile against the database

        Returns:
            Hits grouped by subject (database sequence) id; the query id of
            each hit is the profile name
        """


class BlastProfileSearcher(ProfileSearcher):
    """Runs ``tblastn -in_pssm`` for every profile in a directory"""

    def __init__(self, profile_dir: str, aligner: BlastAligner):
        if not os.path.isdir(profile_dir):
            raise FileOperationError(f"Profile directory {profile_dir} not found or invalid")
        self.profile_dir = profile_dir
        self.aligner = aligner
        self.profiles = sorted(glob.glob(os.path.join(profile_dir, f"*{PROFILE_SUFFIX}")))
        if not self.profiles:
            logger.warning(f"No {PROFILE_SUFFIX} profiles found in {profile_dir}")
        else:
            logger.info(f"{len(self.profiles)} profiles found in {profile_dir}")

    @staticmethod
    def profile_name(path: str) -> str:
        return os.path.basename(path)[:-len(PROFILE_SUFFIX)]

    def profile(self, database: str, params: BlastParameters) -> Dict[str, List[AlignmentHit]]:
        hits = []
        for path in self.profiles:
            name = self.profile_name(path)
            found = self.aligner.profile_search(path, database, params)
            logger.debug(f"Profile {name} produced {len(found)} hits")
            hits.extend(replace(hit, query_id=name, query_loc=replace(hit.query_loc, sequence_id=name))
                        for hit in found)
        return group_by_subject(hits)
