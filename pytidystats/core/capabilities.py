"""
Capability string constants for PyTidyStats.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Each model adapter declares the capabilities its variant defines. The
augmentation layer gates every optional diagnostic column on these flags,
never on whether some internal field happens to be missing.

Usage:
    from pytidystats.core.capabilities import CAPABILITY_HAT

    if adapter.supports(CAPABILITY_HAT):
        columns['.hat'] = hat_values(...)
"""

# Per-observation augmentation tied to the original covariates
CAPABILITY_AUGMENT = 'augment'

# Diagonal of a (weighted) linear projection matrix
CAPABILITY_HAT = 'hat'

# Leave-one-out residual scale via the closed-form identity
CAPABILITY_LOO_SIGMA = 'loo_sigma'

# Cook's distance
CAPABILITY_COOKSD = 'cooksd'

# Standardized residuals (scaled by leverage)
CAPABILITY_STD_RESID = 'std_resid'

# All capabilities as a frozenset for validation
ALL_CAPABILITIES = frozenset({
    CAPABILITY_AUGMENT,
    CAPABILITY_HAT,
    CAPABILITY_LOO_SIGMA,
    CAPABILITY_COOKSD,
    CAPABILITY_STD_RESID,
})

__all__ = [
    'CAPABILITY_AUGMENT',
    'CAPABILITY_HAT',
    'CAPABILITY_LOO_SIGMA',
    'CAPABILITY_COOKSD',
    'CAPABILITY_STD_RESID',
    'ALL_CAPABILITIES',
]
