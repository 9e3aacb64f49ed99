from __future__ import annotations

import math

import pytest

from gigmatch.core import CRITERIA, WeightResolver, WeightVector, resolve_weights
from gigmatch.errors import InvalidInputError


def test_resolve_defaults_every_criterion():
    vector = resolve_weights()

    assert list(vector.weights) == list(CRITERIA)
    assert all(weight == 1.0 for weight in vector.weights.values())
    assert vector.explicit == frozenset()


def test_resolve_merges_partial_and_aliases():
    vector = WeightResolver().resolve({"skills": 3, "Languages": 2.5})

    assert vector["skills"] == 3.0
    assert vector["language"] == 2.5
    assert vector["experience"] == 1.0
    assert vector.explicit == frozenset({"skills", "language"})


def test_resolve_passes_weight_vector_through():
    vector = resolve_weights({"region": 0})

    assert resolve_weights(vector) is vector
    assert "region" not in vector.applied()


@pytest.mark.parametrize(
    "weights",
    [
        {"unknown": 1},
        {"skills": -1},
        {"skills": math.nan},
        {"skills": math.inf},
        {"skills": True},
        {"skills": "high"},
    ],
)
def test_resolve_rejects_invalid_weights(weights):
    with pytest.raises(InvalidInputError):
        resolve_weights(weights)


def test_resolve_reports_every_problem():
    with pytest.raises(InvalidInputError) as exc:
        resolve_weights({"unknown": 1, "skills": -2})

    message = str(exc.value)
    assert "unknown criterion 'unknown'" in message
    assert "skills=-2" in message


def test_resolve_rejects_non_mapping():
    with pytest.raises(InvalidInputError):
        resolve_weights([("skills", 1)])  # type: ignore[arg-type]


def test_descending_order_keeps_canonical_ties():
    vector = resolve_weights({"language": 2, "experience": 0.5, "skills": 2})

    assert vector.by_descending_weight() == [("skills", 2.0), ("language", 2.0), ("experience", 0.5)]
    assert len(vector.by_descending_weight(explicit_only=False)) == len(CRITERIA)


def test_weight_vector_get_default():
    vector = WeightVector(weights={"skills": 1.0})

    assert vector.get("region") == 0.0
    assert vector.as_dict() == {"skills": 1.0}
