"""
Differentiation Configuration

Shared configuration and helper predicates for the differentiation engine.
Decides which leaf values count as differentiable scalars.
"""

import numbers
from typing import Tuple


class ADConfig:
    """Shared configuration for the differentiation engine"""

    # Leaf types accepted as differentiable scalars (numpy scalars register
    # themselves with the numbers ABCs, so they are covered as well).
    SCALAR_TYPES: Tuple[type, ...] = (numbers.Number,)

    # Number of terms `taylor_polynomial` sums when no count is given
    DEFAULT_TAYLOR_TERMS: int = 5

    @classmethod
    def register_scalar_type(cls, scalar_type: type) -> None:
        """
        Accept instances of `scalar_type` as structure leaves that can be
        differentiated (e.g. a user-defined numeric kind).

        The type must support +, -, * and / against plain numbers.
        """
        if scalar_type not in cls.SCALAR_TYPES:
            cls.SCALAR_TYPES = cls.SCALAR_TYPES + (scalar_type,)

    @classmethod
    def is_differentiable_scalar(cls, x) -> bool:
        """
        True for perturbed values and registered scalar kinds.

        Booleans are numbers to Python but never valid differentiation leaves.
        """
        from .core.differential import Differential

        if isinstance(x, bool):
            return False
        return isinstance(x, Differential) or isinstance(x, cls.SCALAR_TYPES)
