# streamlit_app.py
import logging
import os
import sys

import streamlit as st
from dotenv import load_dotenv

# Add project root to sys.path to allow 'from app...' imports
# when running `streamlit run streamlit_app.py` from the project root.
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.core.settings import Settings, get_settings  # noqa: E402
from app.safety_plan.controller import SafetyPlanWizard  # noqa: E402
from app.safety_plan.errors import ExportError  # noqa: E402
from app.safety_plan.export import PlanExporter  # noqa: E402
from app.safety_plan.schemas import EntryFormat, PairedEntry  # noqa: E402

# --- App Configuration & Initialization ---
load_dotenv(os.path.join(PROJECT_ROOT, ".env"))  # Load .env from project root

try:
    cfg: Settings = get_settings()
except Exception as e:
    st.error(f"Error loading application settings. Please check your .env file. Error: {e}")
    st.stop()

logging.basicConfig(level=cfg.LOG_LEVEL.value)
logger = logging.getLogger(__name__)

STR = {
    "page_title": "Crisis Response Planner",
    "header": "BAUER LABS Crisis Response Planner",
    "step_heading": "Step {step}: {title}",
    "previous_button": "Previous",
    "next_button": "Next",
    "save_button": "Save Plan",
    "download_button": "Download PDF",
    "new_plan_button": "Start a new plan",
    "restore_button": "Restore last saved plan",
    "restore_missing": "No saved safety plan found.",
    "restore_error": "The saved safety plan could not be loaded.",
    "save_success": "Safety Plan saved and downloaded successfully!",
    "save_error": "Your safety plan could not be saved.",
    "name_placeholder": "Name",
    "secondary_placeholder": {EntryFormat.CONTACT: "Contact", EntryFormat.PROFESSIONAL: "Phone"},
}

# --- Initialize Session State ---
if "wizard" not in st.session_state:
    st.session_state.wizard = SafetyPlanWizard()
if "export_result" not in st.session_state:
    st.session_state.export_result = None
if "plan_generation" not in st.session_state:
    st.session_state.plan_generation = 0
if "exporter" not in st.session_state:
    st.session_state.exporter = PlanExporter(cfg)

wizard: SafetyPlanWizard = st.session_state.wizard
exporter: PlanExporter = st.session_state.exporter


def start_new_plan() -> None:
    st.session_state.wizard = SafetyPlanWizard()
    st.session_state.plan_generation += 1
    st.session_state.export_result = None


# --- Page Setup ---
st.set_page_config(page_title=STR["page_title"], layout="wide")
st.title(STR["header"])
st.progress(wizard.progress)

with st.sidebar:
    if st.button(STR["restore_button"], key="restore_btn", use_container_width=True):
        try:
            snapshot = exporter.load_last()
        except Exception as e:
            logger.error(f"Loading the saved plan failed: {e}", exc_info=True)
            st.error(f"{STR['restore_error']} {e}")
        else:
            if snapshot is None:
                st.warning(STR["restore_missing"])
            else:
                st.session_state.wizard = SafetyPlanWizard(snapshot.data)
                st.session_state.plan_generation += 1
                st.session_state.export_result = None
                st.rerun()
    st.button(STR["new_plan_button"], key="new_plan_btn", on_click=start_new_plan, use_container_width=True)

# --- Finished plan: notification and download ---
result = st.session_state.export_result
if result is not None:
    st.success(STR["save_success"])
    st.download_button(
        STR["download_button"],
        data=result.pdf_bytes,
        file_name=result.file_name,
        mime="application/pdf",
        key="download_btn",
    )
    st.stop()

# --- Current step ---
template = wizard.current_template
st.subheader(STR["step_heading"].format(step=wizard.current_step, title=template.step_title))
st.caption(template.step_prompt)

for index, entry in enumerate(wizard.plan.section(template.key)):
    # Widget keys change with every new or restored plan so stale input state is not reused.
    widget_key = f"{st.session_state.plan_generation}_{template.key.value}_{entry.id}"
    if isinstance(entry, PairedEntry):
        col1, col2 = st.columns(2)
        name = col1.text_input(
            STR["name_placeholder"],
            value=entry.primary,
            placeholder=STR["name_placeholder"],
            key=f"{widget_key}_primary",
            label_visibility="collapsed",
            disabled=wizard.locked,
        )
        secondary_label = STR["secondary_placeholder"][template.entry_format]
        secondary = col2.text_input(
            secondary_label,
            value=entry.secondary,
            placeholder=secondary_label,
            key=f"{widget_key}_secondary",
            label_visibility="collapsed",
            disabled=wizard.locked,
        )
        if (name, secondary) != (entry.primary, entry.secondary):
            wizard.set_pair(template.key, index, primary=name, secondary=secondary)
    else:
        text = st.text_input(
            f"{template.step_title} #{entry.id}",
            value=entry.text,
            placeholder=f"{template.step_title} #{entry.id}",
            key=widget_key,
            label_visibility="collapsed",
            disabled=wizard.locked,
        )
        if text != entry.text:
            wizard.set_text(template.key, index, text)

# --- Navigation ---
col_prev, col_next = st.columns(2)
if col_prev.button(STR["previous_button"], key="prev_btn", disabled=wizard.is_first_step):
    wizard.retreat()
    st.rerun()

if wizard.is_last_step:
    if col_next.button(STR["save_button"], key="save_btn", type="primary"):
        try:
            st.session_state.export_result = wizard.finish(exporter)
        except ExportError as e:
            st.error(f"{STR['save_error']} {e}")
        else:
            st.rerun()
else:
    if col_next.button(STR["next_button"], key="next_btn", type="primary"):
        wizard.advance()
        st.rerun()

# --- To run this app: streamlit run streamlit_app.py ---
