from typing import Any, Dict, Mapping


class LogSanitizer:
    """
    Masks account numbers and lookup keys before they reach a log record.

    Only the tail of each value is kept so that log lines can still be
    correlated with a request without exposing the full identifier.
    """

    MASK = "***"

    # field name -> number of trailing characters left visible
    SENSITIVE_FIELDS: Dict[str, int] = {
        "cuenta": 4,
        "beneficiary_account": 4,
        "criterio": 3,
        "criterion": 3,
    }

    def __init__(self, mask: str = MASK):
        self.mask = mask

    def _mask_value(self, value: Any, visible: int) -> str:
        text = "" if value is None else str(value)
        return f"{self.mask}{text[-visible:] if text else ''}"

    def sanitize(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Returns a shallow copy of ``data`` with sensitive fields masked.
        Nested mappings (e.g. a ``payload`` entry) are sanitized as well.
        """
        sanitized: Dict[str, Any] = {}
        for key, value in data.items():
            if key in self.SENSITIVE_FIELDS:
                sanitized[key] = self._mask_value(value, self.SENSITIVE_FIELDS[key])
            elif isinstance(value, Mapping):
                sanitized[key] = self.sanitize(value)
            else:
                sanitized[key] = value
        return sanitized
