"""
Market equilibrium engine for a two-sided delivery platform.

One evaluation turns a ParameterVector into an EquilibriumSnapshot through
a chain of closed-form stages, each feeding the next:

1. Structural adjustment
   Competition erodes the platform's pricing power; macro growth net of
   inflation scales the whole market.

2. Labor intensity
   A regulation-discounted social optimum is blended with the raw effort
   level.

3. Routing efficiency
   Innovation raises effective efficiency, regulation tempers it.

4. Delivery time and algorithmic stress
   Slow routing, monitoring and congestion lengthen delivery; running over
   the consumer's tolerance turns into stress for the rider.

5. Demand
   Six bounded factors (price, wait, network, competition, macro,
   capacity) scale the base market.

6. Platform, riders, consumers
   Profit net of tax and social contributions; rider utility net of
   effort, stress, training and safety costs; consumer surplus.

7. Externalities and welfare
   Environmental, traffic, inequality, bias and subsidy costs against
   employment, innovation and digitalization benefits.

Every floor and ceiling below is load-bearing: they are what keeps the
outputs finite under extreme parameter combinations.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import EngineConstants, ParameterVector
from .exceptions import InvalidParameterError
from .inequality import InequalityAnalyzer
from .recommendations import Recommendation, RecommendationEngine, RecommendationInputs
from .validation import validate_parameters

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalityCosts:
    environmental: float
    traffic: float
    inequality: float
    algorithmic_bias: float
    subsidy: float  # public cost of the minimum-wage top-up
    total_externality: float  # net of benefits


@dataclass(frozen=True)
class ExternalityBenefits:
    employment: float
    innovation_spillover: float
    digitalization: float


@dataclass(frozen=True)
class MarketLabels:
    is_pareto: bool
    stress_level: str  # STABLE / HIGH / CRITICAL
    market_status: str  # MONOPOLISTIC / OLIGOPOLY / COMPETITIVE
    regulation_status: str  # LAISSEZ_FAIRE / MODERATE / STRICT
    sustainability_level: str  # POOR / GOOD / EXCELLENT


@dataclass(frozen=True)
class EquilibriumSnapshot:
    """All outputs of one evaluation."""

    demand: float  # D
    platform_profit: float  # P
    rider_utility: float  # Ur, aggregate over the rider population
    social_welfare: float  # SW
    consumer_surplus: float  # CS
    delivery_time: float  # T, minutes
    stress_probability: float  # p
    effective_intensity: float  # e_eff

    # Normalized indices
    market_efficiency: float  # 0-100
    gini_coefficient: float  # 0-1
    sustainability_index: float  # 0-100
    innovation_index: float
    regulatory_effectiveness: float

    costs: ExternalityCosts
    benefits: ExternalityBenefits
    recommendations: Tuple[Recommendation, ...]
    labels: MarketLabels


# Tier names, highest first
STRESS_LEVELS = ("CRITICAL", "HIGH", "STABLE")
MARKET_STATUSES = ("COMPETITIVE", "OLIGOPOLY", "MONOPOLISTIC")
REGULATION_STATUSES = ("STRICT", "MODERATE", "LAISSEZ_FAIRE")
SUSTAINABILITY_LEVELS = ("EXCELLENT", "GOOD", "POOR")


def _tier(value: float, upper: float, middle: float, labels: Tuple[str, str, str]) -> str:
    """Three-way classification with strict thresholds; ties fall lower."""
    if value > upper:
        return labels[0]
    if value > middle:
        return labels[1]
    return labels[2]


class EquilibriumEngine:
    """Stateless single-point equilibrium calculator."""

    def __init__(
        self,
        constants: Optional[EngineConstants] = None,
        recommender: Optional[RecommendationEngine] = None,
    ):
        self.constants = constants or EngineConstants()
        self.inequality = InequalityAnalyzer(self.constants.R_count)
        self.recommender = recommender or RecommendationEngine()

    def compute(
        self,
        r: float,
        e: float,
        eta: float,
        tau: float,
        lambda_: float,
        monitoring: float = 0.5,
        competition: float = 0.3,
        regulation: float = 0.2,
        innovation: float = 0.6,
    ) -> EquilibriumSnapshot:
        """Validate the inputs, then evaluate them.

        Raises:
            InvalidParameterError: a value is non-finite or out of range.
        """
        params = ParameterVector(
            r=r, e=e, eta=eta, tau=tau, lambda_=lambda_,
            monitoring=monitoring, competition=competition,
            regulation=regulation, innovation=innovation,
        )
        return self.evaluate(validate_parameters(params))

    def evaluate(self, params: ParameterVector) -> EquilibriumSnapshot:
        """Run the formula pipeline on an already-trusted parameter vector."""
        c = self.constants
        r, e, eta, tau = params.r, params.e, params.eta, params.tau
        lam = params.lambda_
        monitoring = params.monitoring
        competition = params.competition
        regulation = params.regulation
        innovation = params.innovation

        # ============================================================
        # 1. STRUCTURAL ADJUSTMENT
        # ============================================================
        competition_factor = max(0.2, 1 - competition * c.delta * 0.5)
        macro_factor = max(0.5, 1 + c.gdp_growth - c.inflation_rate)

        # ============================================================
        # 2. EFFECTIVE LABOR INTENSITY
        # ============================================================
        e_social_optimal = e * (0.75 - regulation * 0.2)
        e_eff = (1 - lam) * e + lam * e_social_optimal

        # ============================================================
        # 3. EFFICIENCY ADJUSTMENT
        # ============================================================
        eta_adjusted = eta * (1 + innovation * c.innovation_rate) * (1 - regulation * 0.1)

        # ============================================================
        # 4. DELIVERY TIME
        # ============================================================
        base_time = tau * (1 - eta_adjusted) * (1 + monitoring * c.s1)
        # The congestion reference term has no limit at zero effort
        if not e_eff > 0:
            raise InvalidParameterError(
                "e_eff", e_eff, "effective labor intensity must be > 0"
            )
        congestion_time = (5 / (0.16 * e_eff)) * (1 + c.e1 * (e_eff / 3) ** 1.5)
        T = base_time + congestion_time

        # ============================================================
        # 5. STRESS PROBABILITY
        # ============================================================
        p_base = max(0.0, (T - tau) / max(tau, 1))
        p_monitoring = monitoring * c.s1
        p_bias = c.algo_bias * (1 - regulation * 0.5)
        p = min(1.0, p_base + p_monitoring + p_bias)

        # ============================================================
        # 6. DEMAND
        # ============================================================
        price_factor = max(0.2, 1 - r * c.price_sensitivity) ** c.alpha
        wait_factor = max(0.2, min(1.2, tau / max(T, 1))) ** c.quality_preference
        network_effect = 1 + c.loyalty_factor * float(np.log1p(max(0.01, eta_adjusted)))
        capacity_factor = max(0.3, min(1.2, eta_adjusted * e_eff / 3))

        D = (
            c.A
            * price_factor
            * wait_factor
            * network_effect
            * competition_factor
            * macro_factor
            * capacity_factor
        )

        # ============================================================
        # 7. PLATFORM PROFIT
        # ============================================================
        orders_per_rider = eta_adjusted * D / c.R_count
        base_income = (1 - r) * c.P_order * orders_per_rider * c.rider_income_factor

        revenue = D * r * c.P_order
        variable_costs = D * c.C_ops
        # Automation trims marketing spend
        fixed_costs = c.C_tech + c.C_marketing * (1 - innovation * 0.2)
        tax_burden = max(0.0, (revenue - variable_costs - fixed_costs) * c.tax_rate)
        data_revenue = D * c.data_value * (1 - regulation * 0.3)
        social_benefits = regulation * c.social_insurance * base_income
        employer_social_cost = social_benefits * c.R_count

        P = (
            revenue
            + data_revenue
            - variable_costs
            - fixed_costs
            - tax_burden
            - employer_social_cost
        )

        # ============================================================
        # 8. RIDER UTILITY
        # ============================================================
        physical_cost = c.c1 * e_eff ** 2
        stress_cost = c.s0 * p ** 1.5 * (1 + monitoring * 0.3)
        training_cost = c.c2 * innovation
        safety_risk_cost = c.safety_cost * e_eff ** 1.8
        # Only tops up riders earning below the minimum wage
        wage_subsidy = max(0.0, c.min_wage - base_income) * regulation

        ur_single = (
            base_income
            + social_benefits
            + wage_subsidy
            - physical_cost
            - stress_cost
            - training_cost
            - safety_risk_cost
        )
        Ur = ur_single * c.R_count

        # ============================================================
        # 9. CONSUMER SURPLUS
        # ============================================================
        privacy_cost = c.privacy_cost * (1 - regulation * 0.4)
        perceived_price = c.P_order * (1 + r * 0.6)
        reservation_price = c.P_order * (1 + c.quality_preference * eta_adjusted)
        price_surplus = max(0.0, reservation_price - perceived_price)
        wait_bonus = max(0.0, tau - T) * 0.5
        experience_penalty = privacy_cost + max(0.0, (T - tau) / max(tau, 1)) * 12
        CS = max(0.0, (price_surplus + wait_bonus - experience_penalty) * (D / 100))

        # ============================================================
        # 10. EXTERNALITIES
        # ============================================================
        environmental_cost = c.e0 * e_eff ** c.e1
        traffic_congestion = 2.5 * (D / 1000) ** 1.3
        inequality_cost = 5 * max(0.0, P / 1000 - Ur / 1000) ** 1.2
        algorithmic_bias_cost = c.algo_bias * D * (1 - regulation * 0.6)
        subsidy_cost = wage_subsidy * c.R_count

        rider_utilization = min(1.0, eta_adjusted * D / (c.R_count * 120))
        employment_benefit = c.R_count * rider_utilization * 8 * (1 - c.unemployment_rate)
        innovation_spillover = innovation * D * 0.02
        digitalization_benefit = eta_adjusted * D * 0.015

        total_externality = (
            environmental_cost
            + traffic_congestion
            + inequality_cost
            + algorithmic_bias_cost
            + subsidy_cost
            - employment_benefit
            - innovation_spillover
            - digitalization_benefit
        )

        # ============================================================
        # 11. SOCIAL WELFARE
        # ============================================================
        SW = P + Ur + CS - total_externality

        # ============================================================
        # 12. NORMALIZED INDICES
        # ============================================================
        market_efficiency = max(0.0, min(100.0, SW / max(P + Ur + CS, 1e-6) * 100))
        gini_coefficient = self.inequality.gini(P, Ur, CS, D)
        sustainability_ratio = environmental_cost / max(abs(SW), 1e-6)
        sustainability_index = max(0.0, min(100.0, 100 - sustainability_ratio * 100))
        innovation_index = innovation * eta_adjusted * 100
        regulatory_effectiveness = regulation * (SW / 20000) * 100

        recommendations = self.recommender.recommend(
            RecommendationInputs(
                r=r,
                e_eff=e_eff,
                p=p,
                social_welfare=SW,
                rider_utility=Ur,
                competition=competition,
                regulation=regulation,
                innovation=innovation,
            )
        )

        # ============================================================
        # 13. CLASSIFICATION
        # ============================================================
        labels = MarketLabels(
            is_pareto=SW > 15000 and Ur > 0 and market_efficiency > 75,
            stress_level=_tier(p, 0.7, 0.5, STRESS_LEVELS),
            market_status=_tier(competition, 0.7, 0.4, MARKET_STATUSES),
            regulation_status=_tier(regulation, 0.6, 0.3, REGULATION_STATUSES),
            sustainability_level=_tier(sustainability_index, 80, 60, SUSTAINABILITY_LEVELS),
        )

        _LOG.debug(
            "equilibrium D=%.1f P=%.1f Ur=%.1f SW=%.1f p=%.3f recs=%d",
            D, P, Ur, SW, p, len(recommendations),
        )

        return EquilibriumSnapshot(
            demand=D,
            platform_profit=P,
            rider_utility=Ur,
            social_welfare=SW,
            consumer_surplus=CS,
            delivery_time=T,
            stress_probability=p,
            effective_intensity=e_eff,
            market_efficiency=market_efficiency,
            gini_coefficient=gini_coefficient,
            sustainability_index=sustainability_index,
            innovation_index=innovation_index,
            regulatory_effectiveness=regulatory_effectiveness,
            costs=ExternalityCosts(
                environmental=environmental_cost,
                traffic=traffic_congestion,
                inequality=inequality_cost,
                algorithmic_bias=algorithmic_bias_cost,
                subsidy=subsidy_cost,
                total_externality=total_externality,
            ),
            benefits=ExternalityBenefits(
                employment=employment_benefit,
                innovation_spillover=innovation_spillover,
                digitalization=digitalization_benefit,
            ),
            recommendations=recommendations,
            labels=labels,
        )
