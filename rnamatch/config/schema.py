#!/usr/bin/env python3
"""
Configuration schema definition for validation
"""
from typing import Dict, Any, List


class ConfigSchema:
    """Configuration schema for validation"""

    SCHEMA = {
        'paths': {
            'temp_dir': {'type': str, 'required': True},
        },
        'tools': {
            'makeblastdb_path': {'type': str, 'required': False},
            'blastn_path': {'type': str, 'required': False},
            'tblastn_path': {'type': str, 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
            'log_dir': {'type': str, 'required': False},
        },
        'match': {
            'batch_size': {'type': int, 'required': True},
            'extend': {'type': int, 'required': True},
            'max_evalue': {'type': (int, float), 'required': True},
            'min_query_coverage': {'type': (int, float), 'required': True},
            'min_percent_identity': {'type': (int, float), 'required': True},
            'max_gap': {'type': int, 'required': True},
            'min_profile_coverage': {'type': (int, float), 'required': True},
            'min_query_bit_score': {'type': (int, float), 'required': False},
            'min_query_identity': {'type': (int, float), 'required': False},
            'starts': {'type': str, 'required': False},
        },
        'verify': {
            'kmer_size': {'type': int, 'required': False},
        },
        'pipeline': {
            'workers': {'type': int, 'required': False},
            'timeout': {'type': int, 'required': False},
            'retries': {'type': int, 'required': False},
        }
    }

    @staticmethod
    def _type_name(expected) -> str:
        if isinstance(expected, tuple):
            return ' or '.join(t.__name__ for t in expected)
        return expected.__name__

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate configuration against schema

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for section, fields in cls.SCHEMA.items():
            if section not in config:
                if any(props.get('required', False) for props in fields.values()):
                    errors.append(f"Missing required configuration section: {section}")
                continue

            section_config = config[section]
            if not isinstance(section_config, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for field, props in fields.items():
                if field not in section_config:
                    if props.get('required', False):
                        errors.append(f"Missing required configuration field: {section}.{field}")
                    continue

                expected_type = props['type']
                value = section_config[field]
                # bool is an int subclass but never a valid threshold
                if isinstance(value, bool) or not isinstance(value, expected_type):
                    errors.append(
                        f"Invalid type for {section}.{field}: expected {cls._type_name(expected_type)}, "
                        f"got {type(value).__name__}"
                    )

        return errors
