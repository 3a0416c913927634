"""Services for WebJar Extractor."""
