"""
Tests for option dataclasses and the coefficient transform.
"""

import dataclasses

import numpy as np
import pytest

from pytidystats import AugmentOptions, TidyOptions, Transform, get_adapter
from pytidystats.core.exceptions import InvalidOption


class TestTransform:

    def test_from_flag(self):
        assert Transform.from_flag(True) is Transform.EXP
        assert Transform.from_flag(False) is Transform.IDENTITY

    def test_exp(self):
        np.testing.assert_allclose(Transform.EXP.apply([0.0, 1.0]), [1.0, np.e])

    def test_identity_returns_copy(self):
        values = np.array([1.0, 2.0])
        out = Transform.IDENTITY.apply(values)
        out[0] = 5.0
        assert values[0] == 1.0


class TestTidyOptions:

    def test_defaults(self):
        options = TidyOptions.build()
        assert options.conf_int is False
        assert options.conf_level == 0.95
        assert options.exponentiate is False

    def test_exponentiate_sets_transform(self):
        options = TidyOptions.build(exponentiate=True)
        assert options.transform is Transform.EXP
        assert options.exponentiate is True

    def test_frozen(self):
        options = TidyOptions.build()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.conf_level = 0.5

    def test_invalid_level(self):
        with pytest.raises(InvalidOption):
            TidyOptions.build(conf_int=True, conf_level=1.0)


class TestAugmentOptions:

    def test_linear_defaults(self, ols_fit):
        options = AugmentOptions.build(get_adapter(ols_fit))
        assert options.predict_type == 'response'
        assert options.residual_type == 'response'

    def test_glm_defaults(self, poisson_fit):
        options = AugmentOptions.build(get_adapter(poisson_fit))
        assert options.predict_type == 'link'
        assert options.residual_type == 'deviance'

    def test_explicit_types(self, poisson_fit):
        options = AugmentOptions.build(
            get_adapter(poisson_fit), predict_type='response', residual_type='pearson'
        )
        assert options.predict_type == 'response'
        assert options.residual_type == 'pearson'

    def test_unknown_type(self, ols_fit):
        with pytest.raises(InvalidOption) as exc_info:
            AugmentOptions.build(get_adapter(ols_fit), residual_type='partial')
        assert exc_info.value.option == 'residual_type'
