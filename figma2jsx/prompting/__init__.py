"""Prompting package.

This package contains deterministic request-construction helpers used by the
core orchestration layer. It does not perform input acquisition, image
encoding, transport, or code extraction.
"""
