#!/usr/bin/env python3
"""
Default configuration values for the RNA match pipeline
"""

DEFAULT_CONFIG = {
    'paths': {
        'temp_dir': './Temp',
    },
    'tools': {
        'makeblastdb_path': 'makeblastdb',
        'blastn_path': 'blastn',
        'tblastn_path': 'tblastn',
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
    'match': {
        'batch_size': 10,
        'extend': 50,
        'max_evalue': 1e-10,
        'min_query_coverage': 95.0,
        'min_percent_identity': 90.0,
        'max_gap': 500,
        'min_profile_coverage': 65.0,
        'min_query_bit_score': 1.1,
        'min_query_identity': 0.0,
        'starts': 'nearest',
    },
    'verify': {
        'kmer_size': 8,
    },
    'pipeline': {
        'workers': 1,
        'timeout': 3600,
        'retries': 0,
    }
}
