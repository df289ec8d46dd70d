"""variant-inspector: faceted filtering and annotation of clinical variant calls."""

__version__ = "0.1.0"
