"""
Model adapters and their static registry.

Each supported statsmodels results class maps to exactly one adapter
class. Lookup walks the results type's MRO, so subclasses (ARIMAResults
under MLEResults, WLS under RegressionResults) resolve to the adapter of
their nearest registered base.

Public API:
    get_adapter(model) -> ModelAdapter
"""

from typing import Any

from statsmodels.genmod.generalized_linear_model import GLMResults
from statsmodels.regression.linear_model import RegressionResults
from statsmodels.robust.robust_linear_model import RLMResults
from statsmodels.tsa.statespace.mlemodel import MLEResults

from pytidystats.adapters.base import ModelAdapter, DesignMatrixAdapter, unwrap_results
from pytidystats.adapters.linear import LinearModelAdapter
from pytidystats.adapters.glm import GeneralizedLinearModelAdapter
from pytidystats.adapters.robust import RobustLinearModelAdapter
from pytidystats.adapters.timeseries import TimeSeriesModelAdapter
from pytidystats.core.exceptions import UnsupportedOperation


ADAPTER_REGISTRY: tuple[tuple[type, type[ModelAdapter]], ...] = (
    (RegressionResults, LinearModelAdapter),
    (GLMResults, GeneralizedLinearModelAdapter),
    (RLMResults, RobustLinearModelAdapter),
    (MLEResults, TimeSeriesModelAdapter),
)

_ADAPTER_LOOKUP: dict[type, type[ModelAdapter]] = dict(ADAPTER_REGISTRY)


def get_adapter(model: Any) -> ModelAdapter:
    """
    Wrap a fitted model in the adapter registered for its type.

    Args:
        model: Fitted statsmodels results (wrapped or bare), or an
            existing ModelAdapter (returned unchanged)

    Returns:
        ModelAdapter for the model's variant

    Raises:
        UnsupportedOperation: If no adapter is registered for the type
    """
    if isinstance(model, ModelAdapter):
        return model

    results = unwrap_results(model)
    for cls in type(results).__mro__:
        adapter_cls = _ADAPTER_LOOKUP.get(cls)
        if adapter_cls is not None:
            return adapter_cls(model)

    supported = ", ".join(cls.__name__ for cls, _ in ADAPTER_REGISTRY)
    raise UnsupportedOperation(
        f"No adapter registered for {type(results).__name__}. "
        f"Supported results types: {supported}",
        variant=type(results).__name__,
        operation='adapt',
    )


__all__ = [
    "get_adapter",
    "ADAPTER_REGISTRY",
    "ModelAdapter",
    "DesignMatrixAdapter",
    "LinearModelAdapter",
    "GeneralizedLinearModelAdapter",
    "RobustLinearModelAdapter",
    "TimeSeriesModelAdapter",
]
