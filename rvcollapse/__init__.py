# File: rvcollapse/__init__.py
# Location: rvcollapse/rvcollapse/__init__.py

"""
rvcollapse Package.

This package provides the collapsing engine for rare variant association
testing: allele frequency estimation, burden collapsing of sample-by-marker
genotype matrices, and phenotype/covariate summaries for output headers.
"""

from .version import __version__
