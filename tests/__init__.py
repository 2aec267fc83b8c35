"""
Test suite for the position risk & chart annotation engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
