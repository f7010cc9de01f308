"""
Experiment Wizard - Streamlit page
Five-step form with AI suggestions: basic info, sample size,
randomization, variables and review

Run with: streamlit run experiment_wizard/app.py
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from experiment_wizard.calculator import (
    ALPHA_LABELS,
    ALPHA_OPTIONS,
    MDE_LABELS,
    MDE_OPTIONS,
    POWER_LABELS,
    POWER_OPTIONS,
    calculate_sample_size,
    effect_size_label,
    generate_sample_size_table,
    precision_label,
    precision_share,
)
from experiment_wizard.config import (
    build_suggestion_config,
    build_wizard_config,
    configure_logging,
    load_config,
)
from experiment_wizard.controller import (
    BASIC,
    RANDOMIZATION,
    REVIEW,
    SAMPLE_SIZE,
    STEPS,
    VARIABLES,
    WizardController,
)
from experiment_wizard.errors import ValidationError
from experiment_wizard.export import export_json, render_markdown
from experiment_wizard.review import run_design_review
from experiment_wizard.state import (
    DATA_TYPES,
    DOMAIN_LABELS,
    DOMAINS,
    EXPERIMENT_TYPE_LABELS,
    EXPERIMENT_TYPES,
)
from experiment_wizard.steps import (
    CLUSTER_TYPES,
    METHOD_DESCRIPTIONS,
    PENDING_RANDOMIZATION,
    TREATMENT_GROUP_OPTIONS,
    AssignmentPreview,
    VariableList,
    accept_sample_size_suggestion,
    assignment_preview,
    calculator_experiment_type,
    check_focus_for_suggestions,
    randomization_suggestion_params,
    split_variable_suggestions,
    stratification_options,
)
from experiment_wizard.suggestions import (
    RANDOMIZATION as RANDOMIZATION_KIND,
    SAMPLE_SIZE as SAMPLE_SIZE_KIND,
    TITLE,
    VARIABLES as VARIABLES_KIND,
    Suggestion,
    SuggestionClient,
    SuggestionSlot,
    build_provider,
)

st.set_page_config(page_title="AI Experiment Creator", layout="centered")


TYPE_DESCRIPTIONS = {
    "mab": "Multi-Armed Bandit experiments adaptively allocate participants to different treatments, optimizing for rewards over time.",
    "cmab": "Contextual MABs consider participant characteristics when making assignment decisions.",
    "bayesian_ab": "Bayesian A/B tests use prior knowledge and continuously update probabilities as data comes in.",
}

TYPE_TIPS = {
    "mab": [
        "Define clear rewards that reflect your business objectives",
        "Choose appropriate priors based on your domain knowledge",
        "Consider the exploration-exploitation tradeoff",
        "Plan how long your experiment needs to run",
    ],
    "cmab": [
        "Identify relevant contextual variables that may affect outcomes",
        "Ensure context variables are available at decision time",
        "Select appropriate context features to avoid overfitting",
        "Consider how context influences which arm performs best",
    ],
    "bayesian_ab": [
        "Define a clear success metric before starting",
        "Set appropriate priors based on existing knowledge",
        "Consider appropriate sample sizes for reliable results",
        "Determine stopping criteria based on posterior probability",
    ],
}

SAMPLE_SIZE_NOTES = {
    "mab": "Multi-Armed Bandits typically need larger sample sizes than traditional A/B tests to account for the exploration phase.",
    "cmab": "Contextual MABs require sufficient data to model the relationship between contexts and outcomes accurately.",
    "bayesian_ab": "Bayesian approaches can often work with smaller sample sizes but still require sufficient data to update prior beliefs.",
}

VARIABLE_NOTES = {
    "mab": "For a Multi-Armed Bandit experiment, you need to define outcome variables to measure the success of each treatment arm.",
    "cmab": "For Contextual MAB experiments, define both outcome variables (what you're measuring) and context variables (factors that may influence outcomes).",
    "bayesian_ab": "For your Bayesian A/B test, define the primary and secondary outcome variables that you'll use to evaluate treatment effects.",
}


@st.cache_data
def load_app_config() -> dict:
    cfg = load_config()
    configure_logging(cfg)
    return cfg


@st.cache_resource
def get_suggestion_client() -> SuggestionClient:
    cfg = load_app_config()
    return SuggestionClient(build_provider(build_suggestion_config(cfg)))


def initialize_state():
    """Create the wizard for this session"""
    if "wizard" not in st.session_state:
        wizard_cfg = build_wizard_config(load_app_config())
        st.session_state.wizard = WizardController(enhanced=wizard_cfg.enhanced)
        st.session_state.review_delay = wizard_cfg.review_delay_seconds
    st.session_state.setdefault("step_errors", {})
    st.session_state.setdefault("design_review", None)


def get_wizard() -> WizardController:
    return st.session_state.wizard


def field_error(field: str):
    message = st.session_state.step_errors.get(field)
    if message:
        st.error(message)


def refresh_suggestion(slot: SuggestionSlot, kind: str, params: Dict[str, Any], key: Any) -> Optional[Suggestion]:
    """Request a new suggestion when the watched inputs changed."""
    if slot.watch(key):
        with st.spinner("Thinking..."):
            slot.request(get_suggestion_client(), kind, params)
    return slot.result


def render_ai_suggestion(text: str, explanation: str, key: str, on_accept=None, args=()) -> None:
    with st.container(border=True):
        st.markdown(f"💡 **AI Suggestion** &nbsp; {text}")
        with st.expander("Why this suggestion?"):
            st.caption(explanation)
        if on_accept is not None:
            st.button("Apply Suggestion", key=key, on_click=on_accept, args=args)


def render_step_indicator(wizard: WizardController):
    st.caption(f"**{wizard.step_name}** · Step {wizard.index + 1} of {len(STEPS)}")
    st.progress(wizard.progress)
    cols = st.columns(len(STEPS))
    for idx, (col, step) in enumerate(zip(cols, STEPS)):
        marker = "✅" if idx < wizard.index else ("🔵" if idx == wizard.index else "⚪")
        col.markdown(f"{marker} <small>{step.name}</small>", unsafe_allow_html=True)


# --------------------------------------------------------------------------
# Step 0: Basic Info
# --------------------------------------------------------------------------


def _apply_name(name: str):
    st.session_state.basic_name = name
    st.session_state.show_name_suggestions = False


def _fetch_name_suggestions():
    wizard = get_wizard()
    try:
        focus = check_focus_for_suggestions(st.session_state.get("basic_focus"))
    except ValidationError as exc:
        st.session_state.step_errors = exc.errors
        return
    st.session_state.step_errors = {}
    experiment_type = st.session_state.get("basic_type") if wizard.enhanced else None
    wizard.slots[TITLE].request(
        get_suggestion_client(),
        TITLE,
        {"domain": st.session_state.get("basic_domain"), "focus": focus, "experiment_type": experiment_type},
    )
    st.session_state.show_name_suggestions = True


def render_basic_info(wizard: WizardController) -> Dict[str, Any]:
    """Step 0: Basic Information"""
    state = wizard.state
    st.subheader("Basic Information")
    st.caption("Let's get started with the basic details of your experiment")

    st.session_state.setdefault("basic_type", state.experiment_type)
    st.session_state.setdefault("basic_domain", state.domain)
    st.session_state.setdefault("basic_focus", state.focus)
    st.session_state.setdefault("basic_name", state.title)
    st.session_state.setdefault("basic_description", state.description)

    if wizard.enhanced:
        experiment_type = st.selectbox(
            "Experiment Type",
            EXPERIMENT_TYPES,
            format_func=EXPERIMENT_TYPE_LABELS.get,
            key="basic_type",
            help="The statistical approach for your experiment",
        )
        st.caption(TYPE_DESCRIPTIONS[experiment_type])

    st.selectbox(
        "Experiment Domain",
        DOMAINS,
        format_func=DOMAIN_LABELS.get,
        key="basic_domain",
        help="The field or sector your experiment belongs to",
    )
    st.text_input(
        "What's the focus of your experiment?",
        key="basic_focus",
        placeholder="e.g., SMS Reminders, Gamification, Incentives",
        help="The main aspect or intervention you're studying",
    )
    field_error("focus")

    col1, col2 = st.columns([3, 1])
    with col1:
        st.text_input(
            "Experiment Name",
            key="basic_name",
            placeholder="e.g., Impact of SMS Reminders on Savings Behavior",
            help="A clear, descriptive name for your experiment",
        )
    with col2:
        st.write("")
        st.write("")
        st.button("✨ AI Suggest Name", on_click=_fetch_name_suggestions, use_container_width=True)
    field_error("name")

    slot = wizard.slots[TITLE]
    if st.session_state.get("show_name_suggestions") and slot.result is not None:
        render_ai_suggestion(
            "Here are some name suggestions for your experiment",
            slot.result.explanation,
            key="accept_title",
        )
        for idx, name in enumerate(slot.result.suggestion):
            st.button(f"Use: {name}", key=f"use_title_{idx}", on_click=_apply_name, args=(name,))

    st.text_area(
        "Description",
        key="basic_description",
        height=120,
        placeholder="Describe the purpose and hypothesis of your experiment...",
        help="A brief summary of what you're testing and why",
    )
    field_error("description")

    if wizard.enhanced:
        tips = TYPE_TIPS[st.session_state.basic_type]
        st.info(f"💡 **Tips for effective {st.session_state.basic_type.upper()} experiments**\n\n"
                + "\n".join(f"- {tip}" for tip in tips))

    return {
        "experiment_type": st.session_state.get("basic_type"),
        "domain": st.session_state.basic_domain,
        "focus": st.session_state.basic_focus,
        "name": st.session_state.basic_name,
        "description": st.session_state.basic_description,
    }


# --------------------------------------------------------------------------
# Step 1: Sample Size
# --------------------------------------------------------------------------


def _accept_sample_size(suggestion: Suggestion):
    st.session_state.sample_manual = str(suggestion.suggestion)
    get_wizard().store.update(accept_sample_size_suggestion(suggestion))
    st.session_state.hide_sample_suggestion = True


def _use_calculated(value: int):
    st.session_state.sample_manual = str(value)
    st.session_state.sample_mode = "manual"


def render_sample_size(wizard: WizardController) -> Dict[str, Any]:
    """Step 1: Sample Size"""
    state = wizard.state
    experiment_type = calculator_experiment_type(state, wizard.enhanced)
    st.subheader("Sample Size Determination")
    st.caption("Determine how many participants you need for statistically significant results")

    if experiment_type:
        st.info(f"**{experiment_type.upper()} Experiment in {DOMAIN_LABELS[state.domain]}**\n\n"
                f"{SAMPLE_SIZE_NOTES[experiment_type]}")

    pc = state.power_calculation
    st.session_state.setdefault("sample_mode", "manual")
    st.session_state.setdefault("sample_manual", str(state.sample_size or ""))
    st.session_state.setdefault("sample_mde", pc.mde if pc and pc.mde in MDE_OPTIONS else 0.2)
    st.session_state.setdefault("sample_power", pc.power if pc and pc.power in POWER_OPTIONS else 0.8)
    st.session_state.setdefault("sample_alpha", pc.alpha if pc and pc.alpha in ALPHA_OPTIONS else 0.05)

    mode = st.radio(
        "Sample Size Determination Method",
        ["manual", "calculator"],
        format_func=lambda m: "I'll set the sample size manually" if m == "manual"
        else "Calculate based on statistical parameters",
        key="sample_mode",
    )

    mde = st.session_state.sample_mde
    slot = wizard.slots[SAMPLE_SIZE_KIND]
    suggestion = refresh_suggestion(
        slot,
        SAMPLE_SIZE_KIND,
        {"experiment_type": experiment_type, "domain": state.domain, "expected_effect": effect_size_label(mde)},
        key=(state.domain, experiment_type, mde),
    )

    if mode == "manual":
        st.text_input("Total Sample Size", key="sample_manual",
                      help="The total number of participants across all groups")
        field_error("sample_size")
        if suggestion is not None and not st.session_state.get("hide_sample_suggestion"):
            label = experiment_type.upper() + " " if experiment_type else ""
            render_ai_suggestion(
                f"We recommend a minimum sample size of {suggestion.suggestion} for your {label}experiment",
                suggestion.explanation,
                key="accept_sample",
                on_accept=_accept_sample_size,
                args=(suggestion,),
            )
        with st.expander("Sample Size Considerations"):
            st.markdown(
                "- Too small: May not detect real effects (false negatives)\n"
                "- Too large: Wastes resources and may detect trivial effects"
            )
    else:
        st.selectbox("Minimum Detectable Effect (MDE)", MDE_OPTIONS, format_func=MDE_LABELS.get,
                     key="sample_mde", help="The smallest effect size you want to be able to detect")
        st.caption("Smaller effects require larger sample sizes to detect reliably")
        st.selectbox("Statistical Power", POWER_OPTIONS, format_func=POWER_LABELS.get,
                     key="sample_power", help="The probability of detecting an effect if it exists")
        st.caption("Higher power reduces false negatives but requires larger samples")
        st.selectbox("Significance Level (α)", ALPHA_OPTIONS, format_func=ALPHA_LABELS.get,
                     key="sample_alpha", help="The probability of falsely rejecting the null hypothesis")
        st.caption("Lower alpha reduces false positives but requires larger samples")

        power = st.session_state.sample_power
        st.markdown("**Statistical Power**")
        st.progress(power)
        st.caption(f"{power * 100:.0f}% chance of detecting an effect if it exists")
        st.markdown("**Effect Size Precision**")
        st.progress(precision_share(st.session_state.sample_mde))
        st.caption(precision_label(st.session_state.sample_mde))

        calculated = calculate_sample_size(
            st.session_state.sample_mde, power, st.session_state.sample_alpha, experiment_type
        )
        st.metric("Calculated Sample Size", calculated)
        st.button("Use this value", on_click=_use_calculated, args=(calculated,))
        st.caption("This calculation is a rough estimate, not a formal power calculation. "
                   "Actual requirements may vary based on experiment specifics.")
        with st.expander("All parameter combinations"):
            st.dataframe(generate_sample_size_table(experiment_type), hide_index=True)

    return {
        "calculation_type": mode,
        "sample_size": st.session_state.sample_manual,
        "mde": st.session_state.sample_mde,
        "power": st.session_state.sample_power,
        "alpha": st.session_state.sample_alpha,
    }


# --------------------------------------------------------------------------
# Step 2: Randomization
# --------------------------------------------------------------------------


def _accept_method(method: str):
    st.session_state.rand_method = method
    st.session_state.hide_rand_suggestion = True


def assignment_figure(preview: AssignmentPreview):
    df = pd.DataFrame([{"group": s.label, "share": s.share, "bar": "Assignment"} for s in preview.segments])
    fig = px.bar(df, x="share", y="bar", color="group", orientation="h", text=df["share"].map("{:.0f}%".format))
    fig.update_layout(height=140, showlegend=False, margin=dict(l=0, r=0, t=0, b=0),
                      xaxis=dict(visible=False, range=[0, 100]), yaxis=dict(visible=False))
    return fig


def render_randomization(wizard: WizardController) -> Dict[str, Any]:
    """Step 2: Randomization Setup"""
    state = wizard.state
    st.subheader("Randomization Setup")
    st.caption("Choose how participants will be assigned to treatment groups")

    st.session_state.setdefault("rand_method", state.randomization_method)
    st.session_state.setdefault("rand_groups", len(state.treatment_groups) or 2)
    st.session_state.setdefault("rand_ratio", state.assignment_ratio)
    st.session_state.setdefault("rand_custom", state.custom_ratio_value)

    method = st.selectbox(
        "Randomization Method",
        ["", "simple", "stratified", "cluster"],
        format_func=lambda m: "Select a method" if not m else f"{m.title()} Randomization",
        key="rand_method",
        help="The method used to assign participants to treatment groups",
    )
    if method:
        st.caption(METHOD_DESCRIPTIONS[method])

    slot = wizard.slots[RANDOMIZATION_KIND]
    params = randomization_suggestion_params(state)
    if params is None:
        if slot.result is not PENDING_RANDOMIZATION:
            slot.set(PENDING_RANDOMIZATION)
        suggestion = slot.result
    else:
        suggestion = refresh_suggestion(
            slot, RANDOMIZATION_KIND, params, key=(params["sample_size"], tuple(params["variables"] or ()))
        )

    if suggestion is not None and not st.session_state.get("hide_rand_suggestion"):
        if suggestion.suggestion == "pending":
            render_ai_suggestion("Please set your sample size first", suggestion.explanation, key="accept_rand")
        else:
            render_ai_suggestion(
                f"We recommend using {suggestion.suggestion} randomization",
                suggestion.explanation,
                key="accept_rand",
                on_accept=_accept_method,
                args=(suggestion.suggestion,),
            )

    if method == "stratified":
        st.multiselect(
            "Stratification Variables",
            stratification_options(state, wizard.enhanced),
            key="rand_strata",
            help="Select variables that you want to ensure are balanced across treatment groups",
        )
    elif method == "cluster":
        col1, col2 = st.columns(2)
        col1.selectbox("Cluster Type", CLUSTER_TYPES, key="rand_cluster_type")
        col2.number_input("Number of Clusters", min_value=2, value=20, step=1, key="rand_cluster_count")

    groups = st.selectbox(
        "Number of Treatment Groups",
        TREATMENT_GROUP_OPTIONS,
        format_func=lambda n: f"{n} (Control + {n - 1} Treatment{'s' if n > 2 else ''})",
        key="rand_groups",
    )
    ratio = st.radio("Assignment Ratio", ["equal", "custom"], format_func=str.title,
                     key="rand_ratio", horizontal=True)
    if ratio == "custom":
        st.text_input("Custom Ratio", key="rand_custom", placeholder=":".join(["1"] * groups),
                      help="One positive whole number per group, separated by colons (e.g., 2:1:1)")

    preview = assignment_preview(ratio, st.session_state.get("rand_custom", ""), groups)
    st.markdown("**Assignment Preview**")
    if preview.is_valid:
        st.plotly_chart(assignment_figure(preview), use_container_width=True)
    else:
        st.info(preview.placeholder)

    return {
        "randomization_method": method,
        "treatment_count": groups,
        "assignment_ratio": ratio,
        "custom_ratio_value": st.session_state.get("rand_custom", ""),
    }


# --------------------------------------------------------------------------
# Step 3: Variables
# --------------------------------------------------------------------------


def _add_variable():
    variables: VariableList = st.session_state.variable_list
    try:
        variables.add(
            st.session_state.get("var_name", ""),
            st.session_state.get("var_type", "outcome"),
            st.session_state.get("var_data_type", "numeric"),
        )
    except ValidationError as exc:
        st.session_state.step_errors = exc.errors
        return
    st.session_state.step_errors = {}
    st.session_state.var_name = ""


def _add_suggested(name: str, kind: str):
    st.session_state.variable_list.add_suggested(name, kind)


def _remove_variable(index: int):
    st.session_state.variable_list.remove(index)


def _render_variable_group(title: str, variables: VariableList, kind: str, empty: str):
    st.markdown(f"**{title}:**")
    members = [(i, v) for i, v in enumerate(variables.variables) if v.type == kind]
    if not members:
        st.caption(empty)
    for index, variable in members:
        col1, col2 = st.columns([4, 1])
        col1.markdown(f"{variable.name} &nbsp; `{variable.data_type}`")
        col2.button("Remove", key=f"remove_var_{index}", on_click=_remove_variable, args=(index,))


def render_variables(wizard: WizardController) -> Dict[str, Any]:
    """Step 3: Variables Setup"""
    state = wizard.state
    experiment_type = state.experiment_type if wizard.enhanced else None
    st.subheader("Variables & Metrics")
    st.caption("Define what you'll measure in your experiment")
    if experiment_type:
        st.info(VARIABLE_NOTES[experiment_type])

    if "variable_list" not in st.session_state:
        st.session_state.variable_list = VariableList.from_state(state, wizard.enhanced)
    variables: VariableList = st.session_state.variable_list

    type_options = ["outcome", "context"] if variables.allow_context else ["outcome"]
    col1, col2 = st.columns(2)
    var_type = col1.selectbox("Variable Type", type_options, format_func=lambda t: f"{t.title()} Variable",
                              key="var_type")
    col2.selectbox("Data Type", DATA_TYPES, format_func=lambda d: "Binary (Yes/No)" if d == "binary" else d.title(),
                   key="var_data_type")
    col3, col4 = st.columns([4, 1])
    col3.text_input("Add New Variable", key="var_name",
                    placeholder="e.g., Conversion Rate" if var_type == "outcome" else "e.g., Age Group")
    with col4:
        st.write("")
        st.write("")
        st.button("Add", on_click=_add_variable, use_container_width=True)
    field_error("new_variable")
    field_error("variable_type")

    _render_variable_group("Outcome Variables", variables, "outcome", "No outcome variables defined yet")
    if variables.allow_context:
        _render_variable_group("Context Variables", variables, "context", "No context variables defined yet")

    slot = wizard.slots[VARIABLES_KIND]
    suggestion = refresh_suggestion(
        slot,
        VARIABLES_KIND,
        {"experiment_type": experiment_type, "domain": state.domain, "title": state.title},
        key=(state.domain, state.title, experiment_type),
    )
    if suggestion is not None:
        outcomes, contexts = split_variable_suggestions(suggestion.suggestion, experiment_type, wizard.enhanced)
        with st.container(border=True):
            st.markdown("💡 **AI Suggested Variables**")
            st.caption(suggestion.explanation)
            for kind, names in (("outcome", outcomes), ("context", contexts)):
                for name in names:
                    if name not in variables:
                        st.button(f"+ {name} ({kind})", key=f"suggest_{kind}_{name}",
                                  on_click=_add_suggested, args=(name, kind))

    return {"variables": list(variables.variables), "domain": state.domain}


# --------------------------------------------------------------------------
# Step 4: Review
# --------------------------------------------------------------------------


def render_review(wizard: WizardController):
    """Step 4: Review & Create"""
    state = wizard.state
    st.subheader("Review & Create")
    review = st.session_state.design_review

    if wizard.enhanced:
        if st.button("🤖 Run AI Design Review"):
            with st.spinner("Reviewing your experiment design..."):
                review = run_design_review(state, st.session_state.review_delay)
            st.session_state.design_review = review
        if review is not None:
            st.metric("Design Quality Score", f"{review.score}/100", delta=review.rating, delta_color="off")
            for issue in review.issues:
                st.warning(issue)
            with st.expander("Suggestions", expanded=True):
                for suggestion in review.suggestions:
                    st.markdown(f"- {suggestion}")
            st.caption("This score is a checklist of common gaps, not a statistical validation.")

    markdown = render_markdown(state, review if wizard.enhanced else None, wizard.enhanced)
    st.markdown(markdown)
    st.warning("Please verify all the experiment details are correct before proceeding. "
               "Once created, some settings cannot be easily modified.")

    col1, col2 = st.columns(2)
    slug = (state.title or "experiment").lower().replace(" ", "_")
    col1.download_button("⬇️ Download Markdown", data=markdown, file_name=f"{slug}.md",
                         mime="text/markdown", use_container_width=True)
    col2.download_button("⬇️ Download JSON", data=export_json(state), file_name=f"{slug}.json",
                         mime="application/json", use_container_width=True)


# --------------------------------------------------------------------------
# Page
# --------------------------------------------------------------------------


STEP_RENDERERS = {
    BASIC: render_basic_info,
    SAMPLE_SIZE: render_sample_size,
    RANDOMIZATION: render_randomization,
    VARIABLES: render_variables,
    REVIEW: render_review,
}


def _clear_step_widgets():
    st.session_state.step_errors = {}
    st.session_state.design_review = None
    for key in ("variable_list", "show_name_suggestions", "hide_sample_suggestion", "hide_rand_suggestion"):
        st.session_state.pop(key, None)


def render_navigation(wizard: WizardController, values: Optional[Dict[str, Any]]):
    st.divider()
    col1, _, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("◀ Back", disabled=wizard.is_first, use_container_width=True):
            wizard.back()
            _clear_step_widgets()
            st.rerun()
    with col3:
        if not wizard.is_last:
            if st.button("Next ▶", type="primary", use_container_width=True):
                result = wizard.submit(values or {})
                if result.ok:
                    _clear_step_widgets()
                else:
                    st.session_state.step_errors = result.errors
                st.rerun()
        elif st.button("Create", type="primary", use_container_width=True):
            st.success(wizard.create())


def main():
    """Main wizard page"""
    st.title("🧪 AI Experiment Creator")
    initialize_state()
    wizard = get_wizard()

    with st.sidebar:
        if st.button("🔄 Start over"):
            wizard.reset()
            for key in list(st.session_state.keys()):
                if key not in ("wizard", "review_delay"):
                    del st.session_state[key]
            st.rerun()

    render_step_indicator(wizard)
    st.divider()
    values = STEP_RENDERERS[wizard.index](wizard)
    render_navigation(wizard, values)


if __name__ == "__main__":
    main()
