"""Job-order fee and revenue computation engine."""

__version__ = "0.1.0"
