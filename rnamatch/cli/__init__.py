#!/usr/bin/env python3
"""
Command-line interface for the RNA match pipeline
"""
