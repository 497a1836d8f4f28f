"""
Markdown policy-analysis report built from the evaluation history.

The report reads the history through analyze_history() and phrases each
metric against fixed policy thresholds. It never calls the engine.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .config import ParameterVector
from .history import HistoryAnalysis, SnapshotHistory, analyze_history, calculate_trend

_LOG = logging.getLogger(__name__)


def format_currency(value: float) -> str:
    """Whole-yuan amount with thousands separators, e.g. ``-¥1,234``."""
    sign = "-" if value < 0 else ""
    return f"{sign}¥{abs(value):,.0f}"


def data_quality_score(n_points: int) -> int:
    if n_points < 5:
        return 60
    if n_points < 15:
        return 80
    return 95


class ReportGenerator:
    """Writes the comprehensive Markdown report."""

    title = "Digital Platform Economy Policy Analysis Report"

    def __init__(self, trend_periods: int = 5):
        self.trend_periods = trend_periods

    def generate(
        self,
        history: SnapshotHistory,
        params: ParameterVector,
        generated_at: Optional[datetime] = None,
    ) -> str:
        a = analyze_history(history, self.trend_periods)
        timestamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
        cs_series = history.series("consumer_surplus")

        return f"""# {self.title}

**Generated**: {timestamp}
**Points analysed**: {len(history)}
**Current parameters**: {self.format_params(params)}

---

## Executive Summary

### Key Findings
{self.executive_summary(a, params)}

### Headline Metrics
{self.headline_metrics(a)}

---

## Market Structure

### 1. Competition
Market competitiveness is {params.competition * 100:.0f}%, a {self.market_structure(params.competition)} market.

### 2. Technology
Technology adoption is {params.innovation * 100:.0f}%: {self.innovation_level(params.innovation)}.

### 3. Regulation
Regulatory strictness is {params.regulation * 100:.0f}%: {self.regulation_level(params.regulation)}.

---

## Equilibrium Analysis

### Platform Strategy
- **Commission rate**: {params.r * 100:.1f}%
- **Assessment**: {self.platform_strategy(params)}

### Labor Market
- **Labor intensity**: {params.e:.1f}
- **Algorithmic monitoring**: {params.monitoring * 100:.0f}%
- **Worker welfare**: {self.worker_welfare(a)}

### Consumer Welfare
- **Service quality**: routing efficiency {params.eta * 100:.0f}%
- **Wait tolerance**: {params.tau:g} minutes
- **Consumer surplus trend**: {self.describe_trend(calculate_trend(cs_series, self.trend_periods))}

---

## Policy Recommendations

### Short term (0-6 months)
{self.short_term(a, params)}

### Medium term (6-18 months)
{self.medium_term(params)}

### Long term (18+ months)
{self.long_term()}

---

## Risk Assessment

### Systemic Risk
{self.systemic_risks(a, params)}

### Regulatory Risk
{self.regulatory_risks(params)}

### Market Risk
{self.market_risks(a, params)}

---

## Technical Appendix

### Model Parameters
```
Core:
- commission rate (r): {params.r}
- labor intensity (e): {params.e}
- routing efficiency (eta): {params.eta}
- wait tolerance (tau): {params.tau}
- social balance weight (lambda): {params.lambda_}

Advanced:
- competition: {params.competition}
- innovation: {params.innovation}
- monitoring: {params.monitoring}
- regulation: {params.regulation}
```

### Statistical Summary
{self.statistical_summary(a)}

### Data Quality
- Sample size: {len(history)}
- Completeness score: {data_quality_score(len(history))}%
- Confidence interval: 95%

---

*Generated from a stylised platform-economy game model; for exploration only.*
"""

    def write(self, path: Union[str, Path], history: SnapshotHistory, params: ParameterVector) -> Path:
        path = Path(path)
        path.write_text(self.generate(history, params), encoding="utf-8")
        _LOG.info("report ▸ wrote %s  (%d points)", path, len(history))
        return path

    # ── Sections ─────────────────────────────────────────────────────

    @staticmethod
    def format_params(params: ParameterVector) -> str:
        return (
            f"r={params.r * 100:.1f}%, e={params.e:g}, eta={params.eta:g}, "
            f"competition={params.competition * 100:.0f}%, "
            f"innovation={params.innovation * 100:.0f}%"
        )

    @staticmethod
    def headline_metrics(a: Optional[HistoryAnalysis]) -> str:
        if a is None:
            return "- No evaluations recorded yet"
        return "\n".join([
            f"- **Mean platform profit**: {format_currency(a.profit.mean)}",
            f"- **Mean social welfare**: {format_currency(a.welfare.mean)}",
            f"- **Mean rider utility**: {a.rider_utility.mean / 1000:.1f}k",
            f"- **Market efficiency**: {a.efficiency.mean:.1f}%",
            f"- **Gini coefficient**: {a.gini.mean:.3f}",
        ])

    @staticmethod
    def executive_summary(a: Optional[HistoryAnalysis], params: ParameterVector) -> str:
        summary = []
        if a is not None and a.welfare.mean > 15000:
            summary.append("- The equilibrium is broadly healthy; social welfare is high")
        else:
            summary.append("- The equilibrium leaves room for improvement; social welfare is modest")

        if params.regulation > 0.5:
            summary.append("- Strong regulation is easing algorithmic pressure and protecting workers")
        elif params.regulation < 0.3:
            summary.append("- Regulation is light; worker protection needs attention")

        if params.competition > 0.6:
            summary.append("- Competition is intense, favouring consumers at the expense of platform margins")
        elif params.competition < 0.3:
            summary.append("- The market is concentrated; antitrust oversight is advisable")
        return "\n".join(summary)

    @staticmethod
    def market_structure(competition: float) -> str:
        if competition > 0.7:
            return "fully competitive"
        if competition > 0.4:
            return "oligopolistic"
        return "monopolistically competitive"

    @staticmethod
    def innovation_level(innovation: float) -> str:
        if innovation > 0.7:
            return "innovation is active and digital transformation is paying off"
        if innovation > 0.4:
            return "innovation is moderate with room to grow"
        return "innovation is lacking; more R&D investment is needed"

    @staticmethod
    def regulation_level(regulation: float) -> str:
        if regulation > 0.6:
            return "strict, focused on labor protection and social responsibility"
        if regulation > 0.3:
            return "moderate, balancing efficiency and fairness"
        return "light, with the market taking the lead"

    @staticmethod
    def platform_strategy(params: ParameterVector) -> str:
        if params.r > 0.25:
            return "commission is high and may suppress demand; consider lowering it"
        if params.r < 0.15:
            return "commission is low, good for expansion but watch profitability"
        return "commission balances growth and profitability"

    @staticmethod
    def worker_welfare(a: Optional[HistoryAnalysis]) -> str:
        if a is not None and a.rider_utility.mean > 0:
            return "rider utility is positive; basic worker welfare is secured"
        return "rider utility is low; labor protection should be strengthened"

    @staticmethod
    def describe_trend(trend: float) -> str:
        if trend > 5:
            return "rising strongly"
        if trend > 0:
            return "rising gently"
        if trend > -5:
            return "broadly stable"
        return "falling, needs attention"

    @staticmethod
    def short_term(a: Optional[HistoryAnalysis], params: ParameterVector) -> str:
        recs = []
        if params.monitoring > 0.7:
            recs.append("- Scale back algorithmic monitoring to ease rider stress")
        if a is not None and a.gini.mean > 0.4:
            recs.append("- Introduce income redistribution to reduce inequality")
        if params.regulation < 0.3 and a is not None and a.rider_utility.mean < 0:
            recs.append("- Introduce an emergency minimum income guarantee")
        if not recs:
            return "- Conditions are stable; keep monitoring the key indicators"
        return "\n".join(recs)

    @staticmethod
    def medium_term(params: ParameterVector) -> str:
        recs = []
        if params.innovation < 0.5:
            recs.append("- Invest in R&D to improve routing efficiency and user experience")
        if params.competition < 0.4:
            recs.append("- Adopt antitrust policy to promote fair competition")
        recs.append("- Establish industry standards and best-practice guidelines")
        recs.append("- Strengthen data privacy protection and algorithmic transparency")
        return "\n".join(recs)

    @staticmethod
    def long_term() -> str:
        return "\n".join([
            "- Build a governance framework for the digital economy that balances innovation and oversight",
            "- Steer the platform economy toward sustainable, multi-stakeholder outcomes",
            "- Set up international cooperation on cross-border platform governance",
            "- Develop new forms of employment relationship suited to digital work",
        ])

    @staticmethod
    def systemic_risks(a: Optional[HistoryAnalysis], params: ParameterVector) -> str:
        risks: List[str] = []
        if a is not None and a.sustainability.mean < 50:
            risks.append("high environmental sustainability risk")
        if params.e > 4.0:
            risks.append("excessive labor intensity may cause safety incidents")
        if params.competition < 0.2:
            risks.append("monopoly risk that may harm consumers")
        return "; ".join(risks) if risks else "systemic risk is under control"

    @staticmethod
    def regulatory_risks(params: ParameterVector) -> str:
        if params.regulation > 0.8:
            return "over-regulation may stifle innovation and market vitality"
        if params.regulation < 0.2:
            return "under-regulation may lead to market failure and social problems"
        return "regulatory intensity is moderate; risk is under control"

    @staticmethod
    def market_risks(a: Optional[HistoryAnalysis], params: ParameterVector) -> str:
        risks: List[str] = []
        if a is not None and a.profit_trend < -10:
            risks.append("declining platform profitability")
        if params.innovation < 0.3:
            risks.append("loss of competitiveness from lagging technology")
        return "; ".join(risks) if risks else "market risk is under control"

    @staticmethod
    def statistical_summary(a: Optional[HistoryAnalysis]) -> str:
        if a is None:
            return "No statistics available."
        mean = a.profit.mean or 1
        return "\n".join([
            "**Platform profit**:",
            f"- Mean: {format_currency(a.profit.mean)}",
            f"- Std. dev.: {format_currency(a.profit.std_dev)}",
            f"- Coefficient of variation: {a.profit.std_dev / mean * 100:.1f}%",
            "",
            "**Social welfare**:",
            f"- Mean: {format_currency(a.welfare.mean)}",
            f"- Trend: {a.welfare_trend:.1f}%",
            "",
            "**Market efficiency**:",
            f"- Mean: {a.efficiency.mean:.1f}%",
            f"- Volatility: {a.efficiency.std_dev:.1f}%",
        ])
