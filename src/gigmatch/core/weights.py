"""Weight resolution for criterion aggregation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ..errors import InvalidInputError
from .scorers import CRITERIA

WEIGHT_ALIASES: dict[str, str] = {
    "languages": "language",
    "schedule": "availability",
    "skill": "skills",
    "timezones": "timezone",
    "regions": "region",
    "industries": "industry",
}


@dataclass(frozen=True)
class WeightVector:
    """Complete criterion weights plus the criteria the caller set explicitly."""

    weights: dict[str, float]
    explicit: frozenset[str] = field(default_factory=frozenset)

    def __getitem__(self, criterion: str) -> float:
        return self.weights[criterion]

    def get(self, criterion: str, default: float = 0.0) -> float:
        return self.weights.get(criterion, default)

    def items(self) -> list[tuple[str, float]]:
        return list(self.weights.items())

    def applied(self) -> dict[str, float]:
        """Criteria that take part in aggregation (non-zero weight)."""
        return {name: weight for name, weight in self.weights.items() if weight > 0}

    def by_descending_weight(self, *, explicit_only: bool = True) -> list[tuple[str, float]]:
        """Criteria sorted by weight, ties kept in canonical order."""
        names = [
            name for name in self.weights
            if not explicit_only or name in self.explicit
        ]
        return sorted(
            ((name, self.weights[name]) for name in names),
            key=lambda item: item[1],
            reverse=True,
        )

    def as_dict(self) -> dict[str, float]:
        return dict(self.weights)


class WeightResolver:
    """Merge a partial weight mapping with defaults.

    Unspecified criteria get ``default_weight``. Weights are not normalized
    here; the aggregator divides by the sum of the weights it applies.
    """

    def __init__(
        self,
        criteria: Iterable[str] = CRITERIA,
        *,
        default_weight: float = 1.0,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._criteria = tuple(criteria)
        self._default_weight = float(default_weight)
        self._aliases = dict(WEIGHT_ALIASES if aliases is None else aliases)

    @property
    def criteria(self) -> tuple[str, ...]:
        return self._criteria

    def resolve(self, partial: Mapping[str, Any] | WeightVector | None = None) -> WeightVector:
        if isinstance(partial, WeightVector):
            return partial
        if partial is not None and not isinstance(partial, Mapping):
            raise InvalidInputError("Weights must be a mapping of criterion name to number")

        supplied: dict[str, float] = {}
        errors: list[str] = []
        for key, value in (partial or {}).items():
            name = self._canonical(key)
            if name is None:
                errors.append(f"unknown criterion {key!r}")
                continue
            try:
                supplied[name] = self._validate(key, value)
            except InvalidInputError as exc:
                errors.append(str(exc))

        if errors:
            valid = ", ".join(self._criteria)
            raise InvalidInputError(f"Invalid weights: {'; '.join(errors)}. Valid criteria: {valid}")

        weights = {
            name: supplied.get(name, self._default_weight)
            for name in self._criteria
        }
        return WeightVector(weights=weights, explicit=frozenset(supplied))

    def _canonical(self, key: Any) -> str | None:
        if not isinstance(key, str):
            return None
        name = key.strip().lower()
        name = self._aliases.get(name, name)
        return name if name in self._criteria else None

    @staticmethod
    def _validate(key: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{key}={value!r} is not a number")
        weight = float(value)
        if not math.isfinite(weight) or weight < 0:
            raise InvalidInputError(f"{key}={value!r} must be a finite non-negative number")
        return weight


def resolve_weights(partial: Mapping[str, Any] | WeightVector | None = None) -> WeightVector:
    return WeightResolver().resolve(partial)


__all__ = ["WeightVector", "WeightResolver", "WEIGHT_ALIASES", "resolve_weights"]
