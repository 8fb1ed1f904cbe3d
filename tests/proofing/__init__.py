"""
Proofing Tests Package
======================
Tests for language detection, the checkers, pattern configuration,
the analyzer facade and report formatting.

Run specific: python3 -m pytest tests/proofing/test_detector.py -v
"""
