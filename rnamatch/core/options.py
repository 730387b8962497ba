#!/usr/bin/env python3
"""
Typed run options for RNA match processing.

The options come from the ``match`` section of the configuration and may be
overridden from the command line. They are validated as a whole before any
sample is touched.
"""
from dataclasses import dataclass, fields, asdict
from typing import Dict, Any, Optional

from rnamatch.exceptions import ConfigurationError


@dataclass
class MatchOptions:
    """Thresholds and tunables for a match run"""
    batch_size: int = 10
    extend: int = 50
    max_evalue: float = 1e-10
    min_query_coverage: float = 95.0      # RNA fragment coverage for genome hits
    min_percent_identity: float = 90.0    # identity for genome hits
    max_gap: int = 500
    min_profile_coverage: float = 65.0    # profile coverage for protein hits
    min_query_bit_score: float = 1.1
    min_query_identity: float = 0.0
    starts: str = 'nearest'

    @classmethod
    def from_config(cls, config: Dict[str, Any],
                    overrides: Optional[Dict[str, Any]] = None) -> 'MatchOptions':
        """Build options from a configuration dictionary

        Args:
            config: Full configuration dictionary (the ``match`` section is used)
            overrides: Values that take precedence, ``None`` values are ignored

        Returns:
            MatchOptions instance (not yet validated)
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in config.get('match', {}).items() if k in known}
        if overrides:
            values.update({k: v for k, v in overrides.items() if k in known and v is not None})
        return cls(**values)

    def validate(self) -> None:
        """Reject out-of-range thresholds

        Raises:
            ConfigurationError: On the first invalid value
        """
        from rnamatch.pipelines.orf import STRATEGIES

        if self.max_evalue >= 1.0:
            raise ConfigurationError("Invalid e-value specified. Must be less than 1.")
        if self.batch_size <= 0:
            raise ConfigurationError("Batch size must be 1 or more.")
        if self.max_gap < 0:
            raise ConfigurationError("Maximum gap must be 0 or more.")
        if self.extend < 0:
            raise ConfigurationError("Extension length must be 0 or more.")
        self._check_range('min_query_coverage', 0.0, 100.0)
        self._check_range('min_percent_identity', 0.0, 100.0)
        self._check_range('min_profile_coverage', 0.0, 100.0)
        self._check_range('min_query_bit_score', 0.0, 10.0)
        self._check_range('min_query_identity', 0.0, 1.0)
        if self.starts.lower() not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown start-finding algorithm {self.starts}",
                {'valid': sorted(STRATEGIES)}
            )

    def _check_range(self, name: str, low: float, high: float) -> None:
        value = getattr(self, name)
        if value < low or value > high:
            raise ConfigurationError(f"{name} must be between {low:g} and {high:g}, got {value}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
