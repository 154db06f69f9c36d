"""Normalizes raw agent responses into scan results or typed failures."""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .models import ScanResult

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "Scan returned no data. Please try again."


class ParseFailureKind(str, Enum):
    AGENT_ERROR = "agent_error"
    NO_DATA = "no_data"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ParsedScan:
    result: ScanResult


@dataclass(frozen=True)
class ParseFailure:
    kind: ParseFailureKind
    message: str
    detail: Optional[str] = None


ParseOutcome = Union[ParsedScan, ParseFailure]


class ResultParser:
    """Turns the agent envelope into a ``ParseOutcome``.

    Envelope shape::

        {"success": bool, "response": {"result": str | dict}, "error": str}

    The result object itself is not schema-checked; ``ScanResult`` fills
    in defaults for anything missing or of the wrong type.
    """

    @staticmethod
    def parse(envelope: Any) -> ParseOutcome:
        if not isinstance(envelope, Mapping):
            return ParseFailure(ParseFailureKind.AGENT_ERROR, NO_DATA_MESSAGE,
                                detail=f"envelope is {type(envelope).__name__}")

        error = ResultParser._error_text(envelope)

        if not envelope.get("success"):
            return ParseFailure(ParseFailureKind.AGENT_ERROR, error or NO_DATA_MESSAGE)

        response = envelope.get("response")
        result = response.get("result") if isinstance(response, Mapping) else None
        if result is None or result == "":
            return ParseFailure(ParseFailureKind.NO_DATA, error or NO_DATA_MESSAGE)

        if isinstance(result, str):
            try:
                result = json.loads(result)
            except ValueError as e:
                logger.warning(f"Agent returned undecodable result: {e}")
                return ParseFailure(ParseFailureKind.MALFORMED, NO_DATA_MESSAGE, detail=str(e))

        if not isinstance(result, Mapping):
            return ParseFailure(ParseFailureKind.MALFORMED, NO_DATA_MESSAGE,
                                detail=f"result is {type(result).__name__}, expected object")

        try:
            return ParsedScan(ScanResult.model_validate(dict(result)))
        except ValidationError as e:
            logger.warning(f"Agent result failed validation: {e}")
            return ParseFailure(ParseFailureKind.MALFORMED, NO_DATA_MESSAGE, detail=str(e))

    @staticmethod
    def _error_text(envelope: Mapping) -> Optional[str]:
        error = envelope.get("error")
        if isinstance(error, str) and error:
            return error
        return None
