# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, Field

from .money import to_money

# constrained types
PositiveInt = Annotated[int, Field(strict=True, ge=0)]
PositiveIntGt1 = Annotated[int, Field(strict=True, gt=1)]
Money = Annotated[Decimal, BeforeValidator(to_money)]
NonNegativeMoney = Annotated[Decimal, BeforeValidator(to_money), Field(ge=0)]
