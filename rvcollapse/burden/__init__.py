# File: rvcollapse/burden/__init__.py
# Location: rvcollapse/rvcollapse/burden/__init__.py
"""
rvcollapse.burden: rare variant collapsing and summary reporting.

Public API
----------
CollapseConfig                   : Configuration dataclass mirroring config.json
CollapsingEngine                 : Applies one strategy to one or many regions
collapse                         : Strategy dispatcher (cmc, zeggini, frequency_weighted, madsen_browning)
cmc_collapse, zeggini_collapse   : Indicator and count collapsing
frequency_weighted_collapse      : Inverse-variance weighted burden from all-sample frequencies
madsen_browning_collapse         : Control-frequency weighted burden
estimate_frequency               : Plain allele frequency of one marker
estimate_frequency_from_controls : Pseudo-count control frequency of one marker
group_by_frequency               : Markers grouped by identical frequency
summarize, CohortSummaryReport   : Phenotype/covariate summaries and header rendering
"""

from rvcollapse.burden.base import CollapseConfig
from rvcollapse.burden.collapsing import (
    COLLAPSE_METHODS,
    cmc_collapse,
    cmc_collapse_groups,
    cmc_collapse_subset,
    collapse,
    frequency_weighted_collapse,
    madsen_browning_collapse,
    progressive_cmc_collapse,
    progressive_madsen_browning_collapse,
    rearrange_by_frequency,
    zeggini_collapse,
)
from rvcollapse.burden.engine import CollapsingEngine, burden_to_frame
from rvcollapse.burden.frequency import (
    control_marker_frequencies,
    estimate_frequency,
    estimate_frequency_from_controls,
    marker_frequencies,
)
from rvcollapse.burden.grouping import bin_by_frequency, group_by_frequency
from rvcollapse.burden.summary import CohortSummaryReport, SummaryStatistic, summarize

__all__ = [
    "COLLAPSE_METHODS",
    "CohortSummaryReport",
    "CollapseConfig",
    "CollapsingEngine",
    "SummaryStatistic",
    "bin_by_frequency",
    "burden_to_frame",
    "cmc_collapse",
    "cmc_collapse_groups",
    "cmc_collapse_subset",
    "collapse",
    "control_marker_frequencies",
    "estimate_frequency",
    "estimate_frequency_from_controls",
    "frequency_weighted_collapse",
    "group_by_frequency",
    "madsen_browning_collapse",
    "marker_frequencies",
    "progressive_cmc_collapse",
    "progressive_madsen_browning_collapse",
    "rearrange_by_frequency",
    "summarize",
    "zeggini_collapse",
]
