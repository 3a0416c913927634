"""WebJar Extractor - unpack WebJar resources onto the filesystem.

Locates front-end libraries bundled under META-INF/resources/webjars inside
jar/zip archives and extracts them as plain static files, skipping files
whose source has not changed since the last extraction.
"""

__version__ = "0.1.0"
