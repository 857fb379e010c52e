"""
Request parameter errors.

There is one error kind: a query parameter whose value is malformed.
Out-of-range numbers are clamped and unknown names are ignored, so neither
raises.
"""

from typing import Any, Dict

ERR_MSG_INVALID_PARAMETER_VALUE = "Invalid value for parameter {parameter}: {value}"


class InvalidParameterValue(ValueError):
    """
    A query parameter carried a value that could not be interpreted.

    Attributes:
        parameter: Lowercased name of the offending parameter
        value: The raw value (or the failing fragment of it) as sent
    """

    code = "InvalidParameterValue"

    def __init__(self, parameter: str, value: str):
        self.parameter = parameter
        self.value = value
        super().__init__(
            ERR_MSG_INVALID_PARAMETER_VALUE.format(parameter=parameter, value=value)
        )

    def __reduce__(self):
        return (self.__class__, (self.parameter, self.value))

    def to_dict(self) -> Dict[str, Any]:
        """Error body for a client-error HTTP response."""
        return {
            "code": self.code,
            "description": str(self),
            "parameter": self.parameter,
            "value": self.value,
        }
