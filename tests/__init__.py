#!/usr/bin/env python3
"""
Test suite for the offer engine.

All tests are unit tests and never reach a real language model:

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v
"""
