"""Tests for the rnamatch package"""
