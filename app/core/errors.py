"""AdPulse — Error types shared by the query layer and the API."""

from typing import Any, Dict, List


class ParameterValidationError(Exception):
    """Raised before any I/O when request parameters are malformed."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__("; ".join(e["msg"] for e in errors))
