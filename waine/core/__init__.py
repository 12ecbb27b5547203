"""
Core domain logic.

Pure retrieval consolidation, citation and stream-framing logic.
No network or filesystem access happens in this package.
"""
