"""
Error types for the observation pipeline.

Decoding never raises: malformed reports are described by DecodeIssue
entries (see bbxx_core.proto.report). Only aggregation can fail.
"""

from typing import Iterable, List


class MissingDataError(ValueError):
    """
    Aggregation cannot produce an observation because required fields are absent.

    Attributes:
        missing_fields: Names of the required fields that had no data
    """

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields: List[str] = list(missing_fields)
        super().__init__(
            "Missing required data for BBXX report: " + ", ".join(self.missing_fields)
        )
