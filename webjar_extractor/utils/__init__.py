"""Utilities for WebJar Extractor."""
