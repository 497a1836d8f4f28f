"""
Gig Platform Policy Lab - Interactive Dashboard

Explores the market equilibrium of a food-delivery platform (riders,
consumers, platform, regulator) under nine policy levers.

Run with: streamlit run app.py
"""

import logging

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd

from gigsim.config import (
    HISTORY_CAPACITY,
    DEFAULT_PARAMETERS,
    ParameterVector,
    SCENARIO_PRESETS,
)
from gigsim.engine import EquilibriumEngine
from gigsim.exceptions import InvalidParameterError
from gigsim.export import export_csv, history_to_frame
from gigsim.history import SnapshotHistory
from gigsim.report import ReportGenerator

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

# ── Page config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="Gig Platform Policy Lab",
    layout="wide",
    initial_sidebar_state="expanded",
)

COLORS = px.colors.qualitative.Set2

# Common layout for all charts
CHART_THEME = dict(
    template="simple_white",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#262730"),
)

RECOMMENDATION_ICONS = {
    "URGENT": "🚨",
    "POLICY": "⚖️",
    "ECONOMIC": "📈",
    "SOCIAL": "🛡️",
}


# ── Helper: history line chart ───────────────────────────────────────
def multi_line(x, series_dict, title, yaxis, height=340):
    fig = go.Figure()
    for i, (name, vals) in enumerate(series_dict.items()):
        fig.add_trace(
            go.Scatter(
                x=x, y=vals, name=name, mode="lines+markers",
                line=dict(color=COLORS[i % len(COLORS)], width=2),
            )
        )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=height,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.3),
    )
    return fig


def externality_chart(snapshot):
    """Horizontal bars: costs positive, benefits negative."""
    costs = snapshot.costs
    benefits = snapshot.benefits
    items = [
        ("Environmental", costs.environmental),
        ("Traffic", costs.traffic),
        ("Inequality", costs.inequality),
        ("Algorithmic bias", costs.algorithmic_bias),
        ("Wage subsidy", costs.subsidy),
        ("Employment", -benefits.employment),
        ("Innovation spillover", -benefits.innovation_spillover),
        ("Digitalization", -benefits.digitalization),
    ]
    fig = go.Figure(go.Bar(
        y=[name for name, _ in items],
        x=[val for _, val in items],
        orientation="h",
        marker_color=["#e15759" if val > 0 else "#59a14f" for _, val in items],
    ))
    fig.update_layout(
        **CHART_THEME,
        title=dict(text="Externalities (cost + / benefit −)", font=dict(size=14)),
        xaxis_title="Welfare units", height=360,
        margin=dict(l=140, r=20, t=40, b=30),
    )
    return fig


# ── Sidebar ──────────────────────────────────────────────────────────
st.sidebar.title("Policy Levers")

preset_name = st.sidebar.selectbox(
    "Scenario Preset",
    ["Custom"] + list(SCENARIO_PRESETS.keys()),
    index=1,  # default to Baseline
)

if preset_name != "Custom":
    preset = SCENARIO_PRESETS[preset_name]
else:
    preset = DEFAULT_PARAMETERS

with st.sidebar.expander("Platform & Labor", expanded=True):
    commission = st.slider(
        "Commission Rate (%)", 0, 50, int(round(preset.r * 100)),
        help="Share of each order kept by the platform",
    )
    intensity = st.slider(
        "Labor Intensity", 0.5, 5.0, float(preset.e), step=0.1,
        help="Deliveries per unit of rider effort",
    )
    efficiency = st.slider(
        "Routing Efficiency", 0.5, 1.0, float(preset.eta), step=0.01,
    )
    tolerance = st.slider(
        "Wait Tolerance (min)", 10, 60, int(preset.tau),
    )
    balance = st.slider(
        "Social Balance Weight (λ)", 0.0, 1.0, float(preset.lambda_), step=0.05,
        help="Blend of raw effort toward the regulated social optimum",
    )

with st.sidebar.expander("Market & Policy", expanded=False):
    monitoring = st.slider(
        "Algorithmic Monitoring", 0.0, 1.0, float(preset.monitoring), step=0.05,
    )
    competition = st.slider(
        "Market Competition", 0.0, 1.0, float(preset.competition), step=0.05,
    )
    regulation = st.slider(
        "Regulatory Strictness", 0.0, 1.0, float(preset.regulation), step=0.05,
    )
    innovation = st.slider(
        "Technology Adoption", 0.0, 1.0, float(preset.innovation), step=0.05,
    )

params = ParameterVector(
    r=commission / 100,
    e=intensity,
    eta=efficiency,
    tau=float(tolerance),
    lambda_=balance,
    monitoring=monitoring,
    competition=competition,
    regulation=regulation,
    innovation=innovation,
)

# ── Evaluate ─────────────────────────────────────────────────────────
engine = EquilibriumEngine()
if "history" not in st.session_state:
    st.session_state.history = SnapshotHistory(HISTORY_CAPACITY)
history = st.session_state.history

try:
    snapshot = engine.compute(
        params.r, params.e, params.eta, params.tau, params.lambda_,
        monitoring=params.monitoring, competition=params.competition,
        regulation=params.regulation, innovation=params.innovation,
    )
except InvalidParameterError as exc:
    st.error(str(exc))
    st.stop()

# Only record a new point when the levers actually moved
if history.latest is None or history.latest.params != params:
    history.append(params, snapshot)

# ── Header ───────────────────────────────────────────────────────────
st.title("Gig Platform Policy Lab")
st.markdown(
    "Single-instant market equilibrium of a delivery platform. "
    "Move the levers in the sidebar; each new setting is added to the "
    f"rolling history (last {HISTORY_CAPACITY} points)."
)

labels = snapshot.labels
c1, c2, c3, c4, c5, c6 = st.columns(6)
c1.metric("Demand (orders)", f"{snapshot.demand:,.0f}")
c2.metric("Platform Profit", f"{snapshot.platform_profit:,.0f}")
c3.metric("Rider Utility", f"{snapshot.rider_utility:,.0f}")
c4.metric("Consumer Surplus", f"{snapshot.consumer_surplus:,.0f}")
c5.metric("Social Welfare", f"{snapshot.social_welfare:,.0f}")
c6.metric("Stress Probability", f"{snapshot.stress_probability:.1%}", labels.stress_level,
          delta_color="off")

# ── Tabs ─────────────────────────────────────────────────────────────
tab_history, tab_external, tab_equity, tab_policy, tab_reports = st.tabs(
    ["History", "Externalities", "Inequality & Status", "Recommendations", "Reports"]
)

# ── TAB: History ─────────────────────────────────────────────────────
with tab_history:
    x = list(range(1, len(history) + 1))
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(
            multi_line(x, {
                "Platform profit": history.series("platform_profit"),
                "Rider utility": history.series("rider_utility"),
                "Consumer surplus": history.series("consumer_surplus"),
                "Social welfare": history.series("social_welfare"),
            }, "Welfare Components", "Welfare units"),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(
            multi_line(x, {
                "Market efficiency": history.series("market_efficiency"),
                "Sustainability": history.series("sustainability_index"),
                "Gini × 100": history.series("gini_coefficient") * 100,
            }, "Normalized Indices", "Index (0-100)"),
            use_container_width=True,
        )

# ── TAB: Externalities ───────────────────────────────────────────────
with tab_external:
    col1, col2 = st.columns([2, 1])
    with col1:
        st.plotly_chart(externality_chart(snapshot), use_container_width=True)
    with col2:
        st.metric("Net Externality", f"{snapshot.costs.total_externality:,.1f}")
        st.metric("Delivery Time", f"{snapshot.delivery_time:.1f} min")
        st.metric("Effective Intensity", f"{snapshot.effective_intensity:.2f}")

# ── TAB: Inequality & Status ─────────────────────────────────────────
with tab_equity:
    pc0, pc1, pc2, pc3, pc4 = st.columns(5)
    pc0.metric("Gini Coefficient", f"{snapshot.gini_coefficient:.3f}")
    pc1.metric("Market Efficiency", f"{snapshot.market_efficiency:.0f}%")
    pc2.metric("Sustainability", f"{snapshot.sustainability_index:.0f}%",
               labels.sustainability_level, delta_color="off")
    pc3.metric("Innovation Index", f"{snapshot.innovation_index:.2f}")
    pc4.metric("Regulatory Effectiveness", f"{snapshot.regulatory_effectiveness:.0f}%")

    status = pd.DataFrame([
        {"Indicator": "Pareto improvement", "Status": "Yes" if labels.is_pareto else "No"},
        {"Indicator": "Rider stress", "Status": labels.stress_level},
        {"Indicator": "Market structure", "Status": labels.market_status},
        {"Indicator": "Regulation", "Status": labels.regulation_status},
        {"Indicator": "Sustainability", "Status": labels.sustainability_level},
        {"Indicator": "Market concentration",
         "Status": f"{engine.constants.market_concentration:.0%}"},
    ])
    st.dataframe(status, hide_index=True, use_container_width=True)

# ── TAB: Recommendations ─────────────────────────────────────────────
with tab_policy:
    if snapshot.recommendations:
        for rec in snapshot.recommendations:
            icon = RECOMMENDATION_ICONS.get(rec.kind, "ℹ️")
            st.markdown(
                f"{icon} **{rec.title}** · {rec.category} · impact {rec.impact}  \n"
                f"{rec.description}"
            )
    else:
        st.info("The current configuration is balanced; keep monitoring the key indicators.")

# ── TAB: Reports ─────────────────────────────────────────────────────
with tab_reports:
    st.dataframe(history_to_frame(history), hide_index=True, use_container_width=True)
    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "Download CSV",
            export_csv(history),
            file_name="platform_equilibrium_history.csv",
            mime="text/csv",
        )
    with col2:
        st.download_button(
            "Download Policy Report",
            ReportGenerator().generate(history, params),
            file_name="policy_analysis_report.md",
            mime="text/markdown",
        )
    if st.button("Clear History"):
        history.clear()
        st.rerun()

# ── Footer ───────────────────────────────────────────────────────────
st.divider()
st.caption(
    "A stylised closed-form model of platform labor markets for educational "
    "exploration. Coefficients are calibrated to plausibility, not estimated "
    "from data."
)
