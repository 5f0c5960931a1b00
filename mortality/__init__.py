"""mortality package initializer.

This package contains the data transformation pipeline for the NCHS
leading-causes-of-death dataset.  Modules include schema normalisation,
region classification, aggregation, reshaping, correlation and the
proportion check.  See individual module docstrings for details.
"""
