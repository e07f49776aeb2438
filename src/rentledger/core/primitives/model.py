# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models; every derived view (ledger entries, gaps, summaries)
    is recomputed from these snapshots rather than mutated in place.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Immutable and hashable; windows are used as dict keys
        extra="forbid",  # Catches typos and missing field definitions immediately
    )

    def copy(self, *, updates: dict = None) -> "Model":
        """
        Return a copy of the model with updated fields (re-validated).

        Args:
            updates: Optional dictionary of field values to update

        Returns:
            A new model instance with the updates applied
        """
        data = self.model_dump()
        data.update(updates or {})
        return type(self).model_validate(data)
