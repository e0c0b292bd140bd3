"""
Table Export - snapshot-consistent table export engine

Materializes the rows of a table, as seen by a running transaction, into
delimited text, line-delimited JSON, raw float vectors (FVECS) or Parquet,
optionally splitting the output across several files.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
