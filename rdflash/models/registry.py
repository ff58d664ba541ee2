"""
Registry of device models the bootloader protocol is known to work with.

Membership is an exact match on the numeric model code; there are no
ranges or wildcards.
"""

from __future__ import annotations

from enum import IntEnum

from rdflash.exceptions import UnsupportedModelError


class SupportedModel(IntEnum):
    """Model codes accepted for flashing."""

    MODEL_60062 = 60062
    MODEL_60065 = 60065
    MODEL_60066 = 60066
    MODEL_60121 = 60121
    MODEL_60125 = 60125
    MODEL_60181 = 60181
    MODEL_60241 = 60241


SUPPORTED_MODEL_CODES: frozenset[int] = frozenset(int(model) for model in SupportedModel)


def is_supported_model(model_code: int) -> bool:
    """Check whether a model code is in the registry."""
    return model_code in SUPPORTED_MODEL_CODES


def require_supported_model(model_code: int) -> SupportedModel:
    """
    Look up a model code in the registry.

    Returns:
        The matching SupportedModel member.

    Raises:
        UnsupportedModelError: If the code is not registered.
    """
    if not is_supported_model(model_code):
        raise UnsupportedModelError(model_code)
    return SupportedModel(model_code)
