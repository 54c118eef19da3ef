"""
Test suite for linmath

Contains:
- tests/unit/          : Unit tests for scalars, shapes, Vector, Matrix,
                         free functions and Pydantic field integration
"""
