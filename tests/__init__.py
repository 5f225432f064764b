"""
Test suite for cartoproj

Contains:
- tests/unit/          : Unit tests for individual modules
"""
