"""Waine retrieval-augmented wine assistant backend."""
