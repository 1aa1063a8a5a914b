from __future__ import annotations

from typing import Any


class EcoWareError(Exception):
    """Base exception for EcoWare errors."""

    default_message = "An error occurred in EcoWare"

    def __init__(self, message: str | None = None, code: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        error_dict: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.code:
            error_dict["code"] = self.code
        if self.details:
            error_dict["details"] = self.details
        return error_dict


class CsvIngestError(EcoWareError):
    default_message = "Error parsing CSV file"


class EmptyInputError(CsvIngestError):
    default_message = "CSV file is empty"


class MissingColumnsError(CsvIngestError):
    default_message = "CSV must contain: date, item_name, quantity, movement_type columns"

    def __init__(self, missing: list[str], message: str | None = None):
        super().__init__(message, code="missing_columns", details={"missing_columns": missing})
        self.missing = missing


class ParseFailureError(CsvIngestError):
    default_message = "Error parsing CSV file"


class ForecastError(EcoWareError):
    default_message = "Demand forecast failed"


class InsufficientDataError(ForecastError):
    default_message = "Need at least 3 data points for forecasting"


class RemoteCallError(EcoWareError):
    default_message = "Remote advisory call failed"


class UnknownActivityError(EcoWareError):
    default_message = "Activity not found"


class SessionBusyError(EcoWareError):
    default_message = "A previous request for this session is still in progress"
