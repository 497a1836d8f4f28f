"""
Rule-based policy recommendations.

Each rule is an independent predicate over a handful of equilibrium
metrics paired with the advisory record it emits. Rules are evaluated in
list order and never short-circuit one another, so the output order is
the rule order.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple


@dataclass(frozen=True)
class RecommendationInputs:
    """Metrics the rules are allowed to look at."""

    r: float
    e_eff: float
    p: float
    social_welfare: float
    rider_utility: float
    competition: float
    regulation: float
    innovation: float


@dataclass(frozen=True)
class Recommendation:
    kind: str  # URGENT / POLICY / ECONOMIC / SOCIAL
    category: str
    title: str
    description: str
    impact: str  # MEDIUM / HIGH / CRITICAL


@dataclass(frozen=True)
class PolicyRule:
    name: str
    applies: Callable[[RecommendationInputs], bool]
    recommendation: Recommendation


DEFAULT_RULES: Tuple[PolicyRule, ...] = (
    PolicyRule(
        "algorithmic_pressure",
        lambda m: m.p > 0.7,
        Recommendation(
            kind="URGENT",
            category="Labor protection",
            title="Reduce algorithmic pressure",
            description=(
                "Algorithmic pressure on riders is too high; introduce "
                "working-hour limits and mandatory rest periods."
            ),
            impact="HIGH",
        ),
    ),
    PolicyRule(
        "market_power",
        lambda m: m.r > 0.25 and m.competition < 0.4,
        Recommendation(
            kind="POLICY",
            category="Antitrust",
            title="Promote market competition",
            description=(
                "Commission is high while competition is weak; consider "
                "antitrust measures."
            ),
            impact="MEDIUM",
        ),
    ),
    PolicyRule(
        "low_welfare",
        lambda m: m.social_welfare < 10000,
        Recommendation(
            kind="ECONOMIC",
            category="Efficiency",
            title="Improve resource allocation",
            description=(
                "Total social welfare is low; raise efficiency through "
                "technical innovation and institutional reform."
            ),
            impact="HIGH",
        ),
    ),
    PolicyRule(
        "negative_rider_utility",
        lambda m: m.rider_utility < 0,
        Recommendation(
            kind="SOCIAL",
            category="Worker rights",
            title="Guarantee rider income",
            description=(
                "Rider utility is negative; introduce a minimum income "
                "guarantee and social insurance coverage."
            ),
            impact="CRITICAL",
        ),
    ),
)


class RecommendationEngine:
    """Evaluates an ordered list of rules; extend by passing more rules."""

    def __init__(self, rules: Sequence[PolicyRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def recommend(self, metrics: RecommendationInputs) -> Tuple[Recommendation, ...]:
        """Records of every rule that fires, in rule order.

        An empty tuple means nothing was flagged; callers supply their own
        neutral message in that case.
        """
        fired: List[Recommendation] = []
        for rule in self.rules:
            if rule.applies(metrics):
                fired.append(rule.recommendation)
        return tuple(fired)
