"""
Typopp Tests Package
====================
Run all tests: python3 -m pytest tests/ -v
"""
