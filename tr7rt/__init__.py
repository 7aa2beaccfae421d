"""Game runtime pieces: tracing, file systems, ADPCM decoding, scenes and game data layouts."""

__version__ = "0.1.0"