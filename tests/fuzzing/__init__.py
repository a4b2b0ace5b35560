"""Fuzz testing suite for the HQL reader."""

from .fuzz import Fuzzer, FuzzFailure, FuzzRunner

__all__ = ["Fuzzer", "FuzzFailure", "FuzzRunner"]
