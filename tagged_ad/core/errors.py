# tagged_ad/core/errors.py


class ShapeMismatch(ValueError):
    """
    Raised when a selector path does not address a location in a structure,
    or when selectors are supplied for a non-structural input.
    """

    def __init__(self, message: str, *, selectors=None):
        super().__init__(message)
        self.selectors = tuple(selectors) if selectors is not None else None


class NonDifferentiableLeaf(TypeError):
    """
    Raised when the structure entry being differentiated is not a
    differentiable scalar (a number, a Differential, or a registered kind).
    """

    def __init__(self, message: str, *, path=None, leaf=None):
        super().__init__(message)
        self.path = tuple(path) if path is not None else None
        self.leaf = leaf
