from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Success:
    """Upstream model answered with text"""
    raw_text: str


@dataclass(frozen=True)
class RecoverableFailure:
    """This model failed; the next candidate may still answer"""
    message: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class FatalFailure:
    """Configuration-level failure; no candidate can succeed"""
    message: str


AttemptOutcome = Union[Success, RecoverableFailure, FatalFailure]
