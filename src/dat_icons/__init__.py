"""DAT icon service.

Resolves game-icon identifiers to archive records, decodes their 32x32 RGBA
payloads, composites the requested layers and serves the result as PNG.
"""

__version__ = "0.1.0"
