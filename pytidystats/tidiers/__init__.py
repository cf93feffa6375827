"""
Tidy, augment and glance views of fitted models.

Public API:
    tidy(model, ...) -> DataFrame     one row per coefficient
    augment(model, ...) -> DataFrame  one row per observation
    glance(model) -> DataFrame        one row per model

Each function handles:
    - Option validation
    - Adapter lookup
    - Output normalization (RangeIndex, fixed column order)

Example:
    >>> from pytidystats.tidiers import tidy, augment, glance
    >>> tidy(fit, conf_int=True)
    >>> augment(fit).plot.scatter('.fitted', '.resid')
    >>> glance(fit)
"""

from pytidystats.tidiers._common import Transform
from pytidystats.tidiers.design import TidyOptions, AugmentOptions
from pytidystats.tidiers.solvers import tidy, augment, glance

__all__ = [
    "tidy",
    "augment",
    "glance",
    "TidyOptions",
    "AugmentOptions",
    "Transform",
]
