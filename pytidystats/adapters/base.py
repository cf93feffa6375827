"""
Abstract base classes for model adapters.

An adapter is a read-only view over one fitted model. Every variant
answers the same questions (coefficients, intervals, fit statistics)
and declares through capability flags which per-observation diagnostics
it defines. Adapters never modify the wrapped model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from patsy import DesignInfo, NAAction, build_design_matrices
from scipy import stats

from pytidystats.core.capabilities import CAPABILITY_AUGMENT
from pytidystats.core.exceptions import DimensionError, UnsupportedOperation
from pytidystats.core.linalg import aliased_columns
from pytidystats.core.validation import check_array
from pytidystats.adapters._common import (
    PREDICT_TYPES,
    RESIDUAL_TYPES,
    CoefficientTable,
    InfluenceInputs,
    Prediction,
)


def unwrap_results(model: Any) -> Any:
    """Return the bare statsmodels results object behind a results wrapper."""
    return getattr(model, '_results', model)


def lookup_statistic(results: Any, name: str) -> float | None:
    """
    Read a scalar statistic from a results object.

    Returns None when the model does not expose it.
    """
    try:
        value = getattr(results, name)
    except (AttributeError, NotImplementedError):
        return None
    if value is None:
        return None
    return float(value)


def as_float_array(values: Any) -> NDArray[np.floating[Any]]:
    return np.asarray(values, dtype=np.float64)


class ModelAdapter(ABC):
    """
    Uniform read-only interface over a fitted model.

    Subclasses set ``variant`` and ``capabilities`` and implement the
    coefficient accessors. Operations outside a variant's capabilities
    raise UnsupportedOperation via ``require``.
    """

    variant: str = 'model'
    capabilities: frozenset[str] = frozenset()
    predict_types: tuple[str, ...] = PREDICT_TYPES
    residual_types: tuple[str, ...] = RESIDUAL_TYPES
    default_predict_type: str = 'response'
    default_residual_type: str = 'response'

    # Output field -> results attribute for the generic fit statistics
    fit_statistic_attributes: dict[str, str] = {
        'logLik': 'llf',
        'AIC': 'aic',
        'BIC': 'bic',
        'deviance': 'deviance',
    }

    def __init__(self, model: Any):
        self._model = model
        self._results = unwrap_results(model)

    @property
    def model(self) -> Any:
        """The wrapped fitted model, as supplied by the caller."""
        return self._model

    def supports(self, capability: str) -> bool:
        """
        Check if this variant defines a capability.

        Unknown capabilities return False, never raise.
        """
        return capability in self.capabilities

    def require(self, capability: str, operation: str) -> None:
        """Raise UnsupportedOperation unless the capability is defined."""
        if not self.supports(capability):
            raise UnsupportedOperation(
                f"{operation} is not defined for {self.variant} models "
                f"({type(self._results).__name__})",
                variant=self.variant,
                operation=operation,
            )

    # === Coefficients ===

    @abstractmethod
    def term_names(self) -> tuple[str, ...]:
        """Term names in the model's native order."""
        ...

    @abstractmethod
    def coefficients(self) -> CoefficientTable:
        """Coefficient matrix: estimate, std.error, statistic, p.value."""
        ...

    def confidence_interval(self, level: float) -> NDArray[np.floating[Any]]:
        """
        Confidence bounds from the model's own interval procedure.

        Args:
            level: Confidence level in (0, 1)

        Returns:
            Array of shape (k, 2) with lower and upper bounds
        """
        return as_float_array(self._results.conf_int(alpha=1.0 - level))

    @property
    def link_name(self) -> str | None:
        """Lower-case link function name, or None without a link concept."""
        return None

    # === Dimensions ===

    @property
    def nobs(self) -> int:
        return int(self._results.nobs)

    @property
    def df_residual(self) -> float | None:
        return lookup_statistic(self._results, 'df_resid')

    @property
    def n_params(self) -> int:
        """Number of estimable coefficients."""
        return int(np.isfinite(self.coefficients().estimate).sum())

    # === Fit statistics ===

    def glance_statistics(self) -> dict[str, float | None]:
        """Variant-specific model-level statistics."""
        return {}

    def fit_statistics(self) -> dict[str, float | None]:
        """
        Generic fit statistics; None marks a statistic the model lacks.
        """
        statistics = {
            field: lookup_statistic(self._results, attribute)
            for field, attribute in self.fit_statistic_attributes.items()
        }
        statistics['df.residual'] = self.df_residual
        return statistics

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({type(self._results).__name__})"


class DesignMatrixAdapter(ModelAdapter):
    """
    Base for variants with a design matrix: linear, GLM and robust fits.

    Provides prediction with standard errors, training-frame recovery and
    new-data design construction. The link defaults to identity.
    """

    capabilities = frozenset({CAPABILITY_AUGMENT})

    @property
    def _statsmodel(self) -> Any:
        return self._results.model

    def term_names(self) -> tuple[str, ...]:
        return tuple(str(name) for name in self._statsmodel.exog_names)

    @property
    def params(self) -> NDArray[np.floating[Any]]:
        return as_float_array(self._results.params)

    @property
    def exog(self) -> NDArray[np.floating[Any]]:
        return as_float_array(self._statsmodel.exog)

    def estimable(self) -> NDArray[np.bool_]:
        """
        Mask of coefficients identified by the design.

        statsmodels solves rank-deficient fits with a pseudo-inverse, so
        aliased terms still get finite estimates; they are found from the
        design itself.
        """
        return ~aliased_columns(self.exog)

    @property
    def n_params(self) -> int:
        """Rank of the design."""
        return int(self.estimable().sum())

    def _reference_distribution(self) -> Any:
        """Sampling distribution of the coefficient statistics."""
        if getattr(self._results, 'use_t', False):
            return stats.t(float(self._results.df_resid))
        return stats.norm()

    def _estimable_solution(
        self,
    ) -> tuple[NDArray[np.bool_], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Coefficients and covariance of the fit without aliased columns.

        The pseudo-inverse solution and the reduced fit share their linear
        predictor, so beta_k = pinv(X_k) X beta and its covariance is
        carried through the same linear map.

        Returns:
            Tuple of (estimable mask, reduced estimates, reduced covariance)
        """
        keep = self.estimable()
        exog = self.exog
        reduction = np.linalg.lstsq(exog[:, keep], exog, rcond=None)[0]
        vcov = as_float_array(self._results.cov_params())
        return keep, reduction @ self.params, reduction @ vcov @ reduction.T

    def coefficients(self) -> CoefficientTable:
        """
        Coefficient table with aliased terms set to NaN.

        Estimable terms of a rank-deficient fit report the coefficients
        of the fit without the aliased columns.
        """
        results = self._results
        keep = self.estimable()
        if keep.all():
            return CoefficientTable(
                terms=self.term_names(),
                estimate=as_float_array(results.params),
                std_error=as_float_array(results.bse),
                statistic=as_float_array(results.tvalues),
                p_value=as_float_array(results.pvalues),
            )

        keep, beta, vcov = self._estimable_solution()
        std_error = np.sqrt(np.maximum(np.diag(vcov), 0.0))
        statistic = beta / std_error
        p_value = 2.0 * self._reference_distribution().sf(np.abs(statistic))

        def expand(values: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
            out = np.full(keep.shape, np.nan, dtype=np.float64)
            out[keep] = values
            return out

        return CoefficientTable(
            terms=self.term_names(),
            estimate=expand(beta),
            std_error=expand(std_error),
            statistic=expand(statistic),
            p_value=expand(p_value),
        )

    def confidence_interval(self, level: float) -> NDArray[np.floating[Any]]:
        keep = self.estimable()
        if keep.all():
            return super().confidence_interval(level)

        keep, beta, vcov = self._estimable_solution()
        quantile = self._reference_distribution().ppf(0.5 + level / 2.0)
        half_width = quantile * np.sqrt(np.maximum(np.diag(vcov), 0.0))
        bounds = np.full((keep.size, 2), np.nan, dtype=np.float64)
        bounds[keep, 0] = beta - half_width
        bounds[keep, 1] = beta + half_width
        return bounds

    def linkinv(self, eta: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        return eta

    def mu_eta(self, eta: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Derivative of the inverse link, dmu/deta."""
        return np.ones_like(eta)

    # === Prediction ===

    def _link_se(self, exog: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """sqrt(diag(X V X')) without forming the n x n product."""
        vcov = as_float_array(self._results.cov_params())
        quad = np.einsum('ij,jk,ik->i', exog, vcov, exog)
        return np.sqrt(np.maximum(quad, 0.0))

    def _prediction(
        self,
        exog: NDArray[np.floating[Any]],
        eta: NDArray[np.floating[Any]] | None = None,
        mu: NDArray[np.floating[Any]] | None = None,
    ) -> Prediction:
        if eta is None:
            eta = exog @ self.params
        if mu is None:
            mu = self.linkinv(eta)
        link_se = self._link_se(exog)
        return Prediction(
            link=eta,
            link_se=link_se,
            response=mu,
            response_se=link_se * np.abs(self.mu_eta(eta)),
        )

    def training_prediction(self) -> Prediction:
        """Fitted values and standard errors on the training observations."""
        fitted = as_float_array(self._results.fittedvalues)
        return self._prediction(self.exog, eta=fitted, mu=self.linkinv(fitted))

    def predict(self, newdata: pd.DataFrame) -> Prediction:
        """Out-of-sample prediction; offsets are not applied to new data."""
        return self._prediction(self.new_exog(newdata))

    def new_exog(self, newdata: pd.DataFrame) -> NDArray[np.floating[Any]]:
        """
        Build the design matrix for new rows.

        Formula models rebuild the design from the stored patsy design
        info; rows with missing covariates are kept and predict as NaN.
        Array models select the exog columns by name, or by position when
        the table has exactly as many columns as the design.
        """
        design_info = getattr(self._statsmodel.data, 'design_info', None)
        if isinstance(design_info, DesignInfo):
            (matrix,) = build_design_matrices(
                [design_info],
                newdata,
                NA_action=NAAction(NA_types=[]),
                return_type='matrix',
            )
            exog = as_float_array(matrix)
        else:
            names = list(self.term_names())
            constant = self._constant_index()
            covariates = [n for i, n in enumerate(names) if i != constant]
            if all(name in newdata.columns for name in names):
                exog = check_array(newdata[names].to_numpy(), 'newdata')
            elif constant is not None and all(n in newdata.columns for n in covariates):
                exog = check_array(newdata[covariates].to_numpy(), 'newdata')
                exog = np.insert(exog, constant, 1.0, axis=1)
            elif newdata.shape[1] == len(names):
                exog = check_array(newdata.to_numpy(), 'newdata')
            else:
                raise DimensionError(
                    f"newdata: cannot match columns {list(newdata.columns)} "
                    f"to model terms {names}"
                )

        if exog.shape[1] != len(self.params):
            raise DimensionError(
                f"newdata: design has {exog.shape[1]} columns, "
                f"model has {len(self.params)} coefficients"
            )
        return exog

    def _constant_index(self) -> int | None:
        const_idx = getattr(self._statsmodel.data, 'const_idx', None)
        if const_idx is None:
            return None
        return int(const_idx)

    def response(self, newdata: pd.DataFrame) -> NDArray[np.floating[Any]] | None:
        """Observed response in newdata, or None if the column is absent."""
        name = self._statsmodel.endog_names
        if not isinstance(name, str) or name not in newdata.columns:
            return None
        return check_array(newdata[name].to_numpy(), name)

    # === Training data ===

    def training_frame(self) -> pd.DataFrame:
        """
        The frame the model was fit on.

        Formula models return the data frame given to the formula (which
        still contains any rows dropped for missing values). Array models
        get a frame of the response and non-constant design columns.
        """
        frame = getattr(self._statsmodel.data, 'frame', None)
        if isinstance(frame, pd.DataFrame):
            return frame

        names = self.term_names()
        constant = self._constant_index()
        columns: dict[str, NDArray[np.floating[Any]]] = {
            str(self._statsmodel.endog_names): as_float_array(self._statsmodel.endog),
        }
        exog = self.exog
        for i, name in enumerate(names):
            if i != constant:
                columns[name] = exog[:, i]
        return pd.DataFrame(columns)

    # === Residuals and influence ===

    @abstractmethod
    def residuals(self, residual_type: str) -> NDArray[np.floating[Any]]:
        ...

    @abstractmethod
    def influence_inputs(self) -> InfluenceInputs:
        ...
