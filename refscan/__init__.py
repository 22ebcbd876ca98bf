"""RefScan: deadline-bounded, streaming reference search over a file tree."""

__version__ = "0.1.0"
