from __future__ import annotations
from enum import StrEnum


class ScoringPolicy(StrEnum):
    additive = "additive"
    multiplicative = "multiplicative"
