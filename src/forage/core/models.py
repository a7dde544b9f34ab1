# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Shared pydantic configuration for Forage models.

Configuration objects built from settings (agent configurations, setting
descriptors) use these bases so whitespace in property values is stripped
and field docstrings become schema descriptions.
"""

from __future__ import annotations

import textcase

from pydantic import BaseModel, ConfigDict


def _model_title(model: type) -> str:
    return textcase.title(model.__name__)


BASEDMODEL_CONFIG = ConfigDict(
    arbitrary_types_allowed=True,
    model_title_generator=_model_title,
    str_strip_whitespace=True,
    use_attribute_docstrings=True,
    validate_by_name=True,
    validate_by_alias=True,
)
FROZEN_BASEDMODEL_CONFIG = BASEDMODEL_CONFIG | ConfigDict(frozen=True)


class BasedModel(BaseModel):
    """Mutable base for models assembled from settings."""

    model_config = BASEDMODEL_CONFIG


class FrozenBasedModel(BaseModel):
    """Immutable, hashable base for identity-bearing models."""

    model_config = FROZEN_BASEDMODEL_CONFIG


__all__ = ("BASEDMODEL_CONFIG", "FROZEN_BASEDMODEL_CONFIG", "BasedModel", "FrozenBasedModel")
