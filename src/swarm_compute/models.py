"""Task and result records exchanged with the compute engine."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class TaskType(str, Enum):
    FFT = "fft"
    SPECTRAL = "spectral"
    SHA_CHAIN = "sha_chain"
    MONTE_CARLO = "monte_carlo"
    SIMULATION = "simulation"
    HASH_SEARCH = "hash_search"
    SIGNAL_CLASSIFY = "signal_classify"
    OPEN_QUESTION = "open_question"
    EXAM = "exam"
    ANALYSIS = "analysis"


class ConsensusMode(str, Enum):
    VERIFY = "verify"
    VOTE = "vote"
    NUMERIC_TOLERANCE = "numeric_tolerance"
    REVIEW = "review"


class Phase(str, Enum):
    SEARCH = "search"
    VERIFY = "verify"
    PRODUCE = "produce"
    JUDGE = "judge"
    REVIEW = "review"


class SignalClass(str, Enum):
    PERIODIC = "PERIODIC"
    QUASI_PERIODIC = "QUASI_PERIODIC"
    STRUCTURED_NOISE = "STRUCTURED_NOISE"
    WHITE_NOISE = "WHITE_NOISE"


class InvalidTaskError(ValueError):
    """Raised when a task descriptor cannot be parsed or validated."""


class PeerResponse(BaseModel):
    """Another participant's previously submitted result.

    Malformed fields degrade to empty values rather than failing the task.
    """

    output_hash: str = ""
    output_value: str | None = None
    index: int | None = None

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return {}

        out = dict(data)
        if not isinstance(out.get("output_hash", ""), str):
            out["output_hash"] = ""
        if not isinstance(out.get("output_value"), str):
            out["output_value"] = None
        if not _is_int(out.get("index")):
            out["index"] = None
        return out


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# Routing fields: a wrong type reads as "unrecognised" and falls through the dispatcher.
_ROUTING_FIELDS = ("task_type", "consensus_mode", "phase")
_OPTIONAL_TEXT_FIELDS = ("description", "candidate")


class Task(BaseModel):
    """A unit of work handed to the engine.

    Only `seed` and `shard_size` are required to validate. Routing fields of the
    wrong type are blanked so the task falls through to the SHA-chain default.

    Fields the engine does not recognise are kept in `extras` so a descriptor can
    be echoed back unchanged; nothing in the engine reads them.
    """

    task_id: str | int | None = None
    task_type: str = ""
    seed: str
    shard_size: int = Field(ge=0)
    consensus_mode: str = ""
    phase: str = ""
    description: str | None = None
    candidate: str | None = None
    responses: list[PeerResponse] | None = None
    n_responses: int | None = None

    extras: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        known = set(cls.model_fields)
        out = {key: value for key, value in data.items() if key in known}

        existing = out.get("extras")
        extras = dict(existing) if isinstance(existing, Mapping) else {}
        extras.update((key, value) for key, value in data.items() if key not in known)
        out["extras"] = extras

        for name in _ROUTING_FIELDS:
            if name in out and not isinstance(out[name], str):
                out[name] = ""
        for name in _OPTIONAL_TEXT_FIELDS:
            if name in out and not isinstance(out[name], str):
                out[name] = None

        task_id = out.get("task_id")
        if not (isinstance(task_id, str) or _is_int(task_id)):
            out["task_id"] = None
        if not _is_int(out.get("n_responses")):
            out["n_responses"] = None

        # Position matters to judging, so non-object entries stay as empty responses.
        responses = out.get("responses")
        if isinstance(responses, list):
            out["responses"] = [r if isinstance(r, Mapping) else {} for r in responses]
        else:
            out["responses"] = None
        return out


class TaskResult(BaseModel):
    """Output of a processor. `output_value` is set only by processors that emit one."""

    output_hash: str
    output_value: str | None = None

    model_config = ConfigDict(frozen=True)

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


def parse_task(raw: str | bytes | Mapping[str, Any]) -> Task:
    """Parse a task descriptor from JSON text or an already-decoded mapping.

    Raises:
        InvalidTaskError: If the input is not JSON, not an object, or its seed
            or shard size is missing or unusable. Other malformed fields are
            normalised instead.
    """

    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidTaskError(f"Task descriptor is not valid JSON: {e}") from e
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise InvalidTaskError(
            f"Task descriptor must be a JSON object, got {type(data).__name__}"
        )

    try:
        return Task.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidTaskError(f"Task descriptor failed validation: {e}") from e
