#!/usr/bin/env python3
"""
Core infrastructure for the RNA match pipeline
"""
