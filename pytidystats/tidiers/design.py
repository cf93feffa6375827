"""
Option dataclasses for the tidiers.

Options are validated once, at the boundary, into immutable dataclasses.
Everything downstream trusts them.
"""

from __future__ import annotations

from dataclasses import dataclass

from pytidystats.adapters.base import ModelAdapter
from pytidystats.core.validation import check_choice, check_conf_level
from pytidystats.tidiers._common import DEFAULT_CONF_LEVEL, Transform


@dataclass(frozen=True)
class TidyOptions:
    """
    Coefficient table options.

    Construction:
        TidyOptions.build(conf_int=True, conf_level=0.9, exponentiate=True)
    """
    conf_int: bool = False
    conf_level: float = DEFAULT_CONF_LEVEL
    transform: Transform = Transform.IDENTITY

    @classmethod
    def build(
        cls,
        *,
        conf_int: bool = False,
        conf_level: float = DEFAULT_CONF_LEVEL,
        exponentiate: bool = False,
    ) -> TidyOptions:
        """
        Validate keyword options.

        Raises:
            InvalidOption: If conf_level is not strictly inside (0, 1)
        """
        return cls(
            conf_int=bool(conf_int),
            conf_level=check_conf_level(conf_level),
            transform=Transform.from_flag(bool(exponentiate)),
        )

    @property
    def exponentiate(self) -> bool:
        return self.transform is Transform.EXP


@dataclass(frozen=True)
class AugmentOptions:
    """
    Observation table options.

    Types left as None resolve to the adapter's defaults (response scale
    for least squares; link scale and deviance residuals for GLMs).
    """
    predict_type: str
    residual_type: str

    @classmethod
    def build(
        cls,
        adapter: ModelAdapter,
        *,
        predict_type: str | None = None,
        residual_type: str | None = None,
    ) -> AugmentOptions:
        """
        Resolve and validate prediction/residual types for an adapter.

        Raises:
            InvalidOption: If a type is not recognized by the variant
        """
        if predict_type is None:
            predict_type = adapter.default_predict_type
        if residual_type is None:
            residual_type = adapter.default_residual_type
        return cls(
            predict_type=check_choice(predict_type, adapter.predict_types, 'predict_type'),
            residual_type=check_choice(residual_type, adapter.residual_types, 'residual_type'),
        )
