# utils/exceptions.py
# Small custom exceptions shared by the calculation core and the UI layer.


class ParameterValidationError(ValueError):
    """
    Raised when a parameter record is missing fields or carries values the
    cost chain cannot use (non-numeric, NaN, infinite). The message lists
    every problem found so a preset typo surfaces in one pass.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("Invalid parameters:\n- " + "\n- ".join(self.errors))


class UnknownCategoryError(ValueError):
    """
    Raised when a tier / quality / region / model string does not match any
    known category. Never silently defaulted.
    """

    def __init__(self, field, value, allowed):
        self.field = field
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Unknown {field}: {value!r}. Available: {self.allowed}"
        )


class UnknownScenarioError(KeyError):
    """Raised when a preset scenario id is not defined."""
    pass
