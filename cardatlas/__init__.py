"""Card Atlas: a catalog of data-field cards and their relationship graph."""

__version__ = "0.1.0"
