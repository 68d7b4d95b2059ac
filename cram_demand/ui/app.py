# cram_demand/ui/app.py
# Run with: streamlit run cram_demand/ui/app.py
import json
import os
from typing import Any, Dict, List, Tuple

import streamlit as st
from dotenv import load_dotenv

from cram_demand.ui.form import (
    AUDIENCE_OPTIONS,
    BUYING_JOB_OPTIONS,
    ENGINE_OPTIONS,
    PRIORITY_OPTIONS,
    GatewayClient,
    RecommendationSession,
)

load_dotenv()

GATEWAY_URL = os.getenv("GATEWAY_URL", "http://localhost:8000")

st.set_page_config(page_title="CRAM Demand", page_icon="📣", layout="centered")

CARD_CSS = """
<style>
.cram-meta { color:#444; margin-top:4px; }
.cram-rank { font-weight:800; font-size:1.05rem; }
</style>
"""


# ------------------------
# Session
# ------------------------
def get_session() -> RecommendationSession:
    if "session" not in st.session_state:
        session = RecommendationSession(GatewayClient(GATEWAY_URL))
        session.load_knowledge_base()
        st.session_state["session"] = session
        st.session_state["pending"] = False
    return st.session_state["session"]


def _select(label: str, options: List[Tuple[str, str]], current: str, key: str) -> str:
    ids = [option_id for option_id, _ in options]
    labels = dict(options)
    if key not in st.session_state:
        st.session_state[key] = current if current in ids else (ids[0] if ids else None)
    return st.selectbox(label, ids, format_func=lambda option_id: labels.get(option_id, option_id), key=key)


def _request_generate() -> None:
    st.session_state["pending"] = True


# ------------------------
# Inputs
# ------------------------
def render_inputs(session: RecommendationSession) -> None:
    form = session.form

    with st.container(border=True):
        st.subheader("Inputs")
        left, right = st.columns(2)

        with left:
            form.initiative_id = _select("Initiative", session.initiative_options, form.initiative_id, "initiative_id") or ""
            form.primary_engine = _select("Primary Engine", ENGINE_OPTIONS, form.primary_engine, "primary_engine")
            form.strategic_priority = _select("Strategic Priority", PRIORITY_OPTIONS, form.strategic_priority, "strategic_priority")

        with right:
            form.buying_job_id = _select("Buying Job", BUYING_JOB_OPTIONS, form.buying_job_id, "buying_job_id")
            form.audience_type = _select("Audience Type", AUDIENCE_OPTIONS, form.audience_type, "audience_type")
            st.markdown("**Secondary Engines**")
            for engine, label in ENGINE_OPTIONS:
                st.checkbox(label, key=f"secondary_{engine}", on_change=form.toggle_secondary, args=(engine,))

        form.trigger_context = st.text_area(
            "Trigger Context (1-2 sentences)",
            key="trigger_context",
            height=100,
            placeholder=(
                "Example: Q3 denial rates exceeded 15%; oncology starts delayed; "
                "CFO requested cost reduction plan."
            ),
        )

        busy = st.session_state["pending"] or session.busy
        st.button(
            "Generating..." if busy else "Generate Recommendation",
            type="primary",
            disabled=busy,
            on_click=_request_generate,
        )

        # Second pass: the button above is already rendered disabled
        if st.session_state["pending"]:
            with st.spinner("Generating..."):
                session.generate()
            st.session_state["pending"] = False
            st.rerun()

        if session.error:
            st.error(session.error)


# ------------------------
# Output
# ------------------------
def _bullets(items: List[str]) -> None:
    if items:
        st.markdown("\n".join(f"- {item}" for item in items))
    else:
        st.caption("None")


def render_asset(asset: Dict[str, Any]) -> None:
    with st.container(border=True):
        st.markdown(f"<div class='cram-rank'>#{asset.get('rank')} · {asset.get('asset_type')}</div>", unsafe_allow_html=True)
        st.markdown(
            f"<div class='cram-meta'><b>Channel:</b> {asset.get('primary_channel')} • "
            f"<b>Format:</b> {asset.get('format')} • <b>Confidence:</b> {asset.get('confidence')}</div>",
            unsafe_allow_html=True,
        )
        st.markdown("**Use case**")
        st.write(asset.get("use_case", ""))
        st.markdown("**Why recommended**")
        _bullets(asset.get("why_recommended") or [])
        st.markdown("**Artifacts supported**")
        st.caption(", ".join(asset.get("supported_internal_artifacts") or []))
        st.caption(
            f"Engines: {', '.join(asset.get('engine_alignment') or [])} · "
            f"Audience: {asset.get('audience_alignment', '')}"
        )


def render_result(result: Dict[str, Any]) -> None:
    with st.container(border=True):
        st.markdown("**Trigger Context Summary**")
        st.write(result.get("trigger_context_summary", ""))

    st.markdown("#### Recommended Assets (Ranked)")
    for asset in sorted(result.get("recommended_assets") or [], key=lambda a: a.get("rank", 0)):
        render_asset(asset)

    build_spec = result.get("top_asset_build_spec") or {}
    with st.container(border=True):
        st.markdown("**Top Asset Build Spec**")
        st.markdown(f"**{build_spec.get('asset_type', '')}**")
        st.markdown(
            f"<div class='cram-meta'><b>Channel:</b> {build_spec.get('primary_channel', '')} • "
            f"<b>Format:</b> {build_spec.get('format', '')}</div>",
            unsafe_allow_html=True,
        )
        st.markdown("**Messaging angle**")
        st.write(build_spec.get("messaging_angle", ""))
        for index, section in enumerate(build_spec.get("outline") or [], start=1):
            st.markdown(f"{index}. **{section.get('section_title', '')}**: {section.get('section_goal', '')}")
            _bullets(section.get("required_elements") or [])

    proof = result.get("proof_requirements") or {}
    with st.expander("Proof Requirements"):
        for category, items in proof.items():
            st.markdown(f"**{category.replace('_', ' ').title()}**")
            _bullets(items)

    objections = result.get("objection_handling") or {}
    with st.expander("Objection Handling"):
        engine_labels = dict(ENGINE_OPTIONS)
        for engine, entries in objections.items():
            st.markdown(f"**{engine_labels.get(engine, engine)}**")
            for entry in entries:
                st.markdown(f"*{entry.get('objection', '')}*")
                st.write(entry.get("response", ""))
                _bullets(entry.get("proof_points") or [])

    trace = result.get("traceability") or {}
    with st.expander("Traceability"):
        st.markdown("**Artifacts referenced**")
        _bullets(trace.get("kb_artifacts_referenced") or [])
        st.markdown("**Decision trace**")
        _bullets(trace.get("decision_trace") or [])
        st.markdown("**Assumptions**")
        _bullets(trace.get("assumptions") or [])

    with st.expander("Raw JSON (expand)"):
        st.code(json.dumps(result, indent=2), language="json")


def main() -> None:
    st.markdown(CARD_CSS, unsafe_allow_html=True)
    st.title("CRAM Demand")
    st.caption("MVP content recommendation engine (dummy KB v1). Structured, traceable outputs.")

    session = get_session()
    render_inputs(session)

    st.subheader("Output")
    if session.result:
        render_result(session.result)
    else:
        st.write("Run a recommendation to see results.")


main()
