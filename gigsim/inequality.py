"""
Inequality estimate over the three income groups of the platform market.

The platform (one entity), the rider population and the consumer population
are treated as three income classes. Their Lorenz curve is approximated by
three trapezoids, which is coarse: the platform's population of one gives it
an extreme per-capita income, so the estimate is dominated by that group.
Good enough for a dashboard indicator, not for inequality research.
"""

import math
from typing import Sequence

import numpy as np

# Returned when nobody has income (or there is nobody at all)
DEGENERATE_GINI = 1.0


def lorenz_gini(incomes: Sequence[float], populations: Sequence[float]) -> float:
    """Gini coefficient of grouped incomes via a trapezoidal Lorenz area.

    Groups are sorted by per-capita income; ties keep their input order.
    Returns DEGENERATE_GINI when total income or total population is not
    positive.
    """
    incomes = np.asarray(incomes, dtype=float)
    populations = np.asarray(populations, dtype=float)

    total_income = incomes.sum()
    total_population = populations.sum()
    if total_income <= 0 or total_population <= 0:
        return DEGENERATE_GINI

    order = np.argsort(incomes / populations, kind="stable")
    income_share = incomes[order] / total_income
    pop_share = populations[order] / total_population

    cum_income = np.cumsum(income_share)
    prev_income = np.concatenate(([0.0], cum_income[:-1]))
    lorenz_area = float(np.sum((prev_income + cum_income) / 2 * pop_share))

    gini = 1 - 2 * lorenz_area
    return max(0.0, min(1.0, gini))


class InequalityAnalyzer:
    """Gini coefficient across platform, riders and consumers."""

    def __init__(self, rider_count: int):
        self.rider_count = rider_count

    def gini(
        self,
        platform_profit: float,
        rider_utility: float,
        consumer_surplus: float,
        demand: float,
    ) -> float:
        incomes = [
            max(0.0, platform_profit),
            max(0.0, rider_utility),
            max(0.0, consumer_surplus),
        ]
        # Round half up: one consumer per order served
        consumers = max(1, math.floor(demand + 0.5))
        populations = [1, self.rider_count, consumers]
        return lorenz_gini(incomes, populations)
