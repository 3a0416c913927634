"""Data models for WebJar Extractor."""
