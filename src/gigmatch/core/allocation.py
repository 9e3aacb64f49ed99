"""Greedy one-to-one assignment of candidates to opportunities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .results import ScoredPair


@dataclass(slots=True, frozen=True)
class Assignment:
    candidate_index: int
    opportunity_index: int
    pair: ScoredPair


class GreedyAllocator:
    """Greedy heuristic over a precomputed score matrix.

    Candidates are visited by descending average score across all
    opportunities. Each takes its best still-unassigned opportunity. The
    result is not guaranteed to maximise the total score.

    Rows and columns are identified by position, so duplicated ids in the
    input can never be assigned twice.
    """

    def allocate(self, matrix: Sequence[Sequence[ScoredPair]]) -> list[Assignment]:
        if not matrix or not matrix[0]:
            return []

        averages = [sum(pair.score for pair in row) / len(row) for row in matrix]
        order = sorted(range(len(matrix)), key=lambda index: averages[index], reverse=True)

        taken: set[int] = set()
        assignments: list[Assignment] = []
        width = len(matrix[0])
        for row_index in order:
            if len(taken) >= width:
                break
            row = matrix[row_index]
            best: int | None = None
            for column, pair in enumerate(row):
                if column in taken:
                    continue
                if best is None or pair.score > row[best].score:
                    best = column
            if best is None:
                continue
            taken.add(best)
            assignments.append(Assignment(row_index, best, row[best]))
        return assignments


__all__ = ["Assignment", "GreedyAllocator"]
