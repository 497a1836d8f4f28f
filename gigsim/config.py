"""
Configuration for the Gig Platform Policy Lab.

Defines the structural constants of the delivery-platform market, the nine
policy-tunable parameters of one evaluation, and the scenario presets
used to pre-populate the dashboard.
"""

from dataclasses import dataclass, replace as _replace
from typing import Dict, Tuple


@dataclass(frozen=True)
class EngineConstants:
    """Structural coefficients of the market, fixed for the engine's lifetime."""

    # --- Demand ---
    A: float = 14000.0  # base market size (orders)
    alpha: float = 2.0  # price elasticity exponent
    beta: float = 1.5
    gamma: float = 0.8
    delta: float = 1.2  # competition elasticity

    # --- Platform costs & pricing ---
    C_ops: float = 2.5  # variable cost per order
    C_tech: float = 800.0
    C_marketing: float = 1200.0
    P_order: float = 35.0  # average order price

    # --- Riders ---
    R_count: int = 100  # active rider population
    R_reserve: float = 0.15
    c1: float = 1.5  # physical effort cost coefficient
    c2: float = 0.8  # training cost per unit of innovation
    rider_income_factor: float = 0.035

    # --- Algorithmic pressure ---
    s0: float = 12.0  # stress cost scale
    s1: float = 0.3  # monitoring surcharge on time and stress
    algo_bias: float = 0.05

    # --- Environment & safety ---
    e0: float = 6.0  # environmental cost scale
    e1: float = 2.2  # congestion / environmental elasticity
    safety_cost: float = 0.8

    # --- Fiscal & labor policy ---
    tax_rate: float = 0.25
    min_wage: float = 15.0
    social_insurance: float = 0.12

    # --- Market structure ---
    innovation_rate: float = 0.02
    market_concentration: float = 0.65
    entry_barrier: float = 5000.0

    # --- Consumers ---
    price_sensitivity: float = 1.8
    quality_preference: float = 0.7
    loyalty_factor: float = 0.4

    # --- Data economy ---
    data_value: float = 0.15
    privacy_cost: float = 0.08

    # --- Macro environment ---
    gdp_growth: float = 0.06
    inflation_rate: float = 0.03
    unemployment_rate: float = 0.05


@dataclass(frozen=True)
class ParameterVector:
    """The nine tunable inputs for one equilibrium evaluation."""

    r: float = 0.2  # platform commission rate, [0, 1)
    e: float = 2.5  # labor intensity, > 0
    eta: float = 0.85  # algorithmic routing efficiency, (0, 1]
    tau: float = 30.0  # consumer wait tolerance (minutes), > 0
    lambda_: float = 0.0  # social-optimum blending weight, [0, 1]
    monitoring: float = 0.5
    competition: float = 0.3
    regulation: float = 0.2
    innovation: float = 0.6

    def replace(self, **changes) -> "ParameterVector":
        """Copy with the given fields changed (e.g. ``replace(r=0.3)``)."""
        return _replace(self, **changes)

    def as_dict(self) -> Dict[str, float]:
        """Field values keyed by their public names (``lambda`` unsuffixed)."""
        return {name: getattr(self, _FIELD_FOR.get(name, name)) for name in PARAMETER_NAMES}


# Public parameter names in export/report order
PARAMETER_NAMES: Tuple[str, ...] = (
    "r", "e", "eta", "tau", "lambda",
    "competition", "innovation", "monitoring", "regulation",
)
_FIELD_FOR = {"lambda": "lambda_"}

DEFAULT_PARAMETERS = ParameterVector()

# Rolling history cap for the dashboard and reports
HISTORY_CAPACITY = 30


# Named scenario presets
SCENARIO_PRESETS: Dict[str, ParameterVector] = {
    "Baseline": ParameterVector(),
    "Strict Regulation": ParameterVector(
        r=0.15,
        e=2.0,
        eta=0.8,
        competition=0.4,
        innovation=0.5,
        monitoring=0.7,
        regulation=0.8,
        lambda_=0.6,
    ),
    "Intense Competition": ParameterVector(
        r=0.12,
        e=3.5,
        eta=0.9,
        competition=0.8,
        innovation=0.7,
        monitoring=0.8,
        regulation=0.1,
        lambda_=0.2,
    ),
    "Innovation Breakthrough": ParameterVector(
        r=0.18,
        e=1.8,
        eta=0.95,
        competition=0.5,
        innovation=0.9,
        monitoring=0.3,
        regulation=0.3,
        lambda_=0.4,
    ),
}
