import json
import os
import sys
from typing import Any, Dict, List, Tuple

# Add parent directory to Python path for module resolution under `streamlit run`
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import streamlit as st

from sop_studio.agents.persona_engine import PersonaProfile, generate_persona_response, load_attributes
from sop_studio.agents.sop_generator import generate_sop
from sop_studio.config.prompts import INDUSTRY_TEMPLATES, LANGUAGE_CONFIGS, TONE_TEMPLATES
from sop_studio.config.settings import configure_logging
from sop_studio.errors import ExportError, GenerationError, NotFoundError
from sop_studio.personas import prebuilt_profiles
from sop_studio.storage import repository
from sop_studio.storage.database import session_scope
from sop_studio.utils.exporter import export_filename, generate_docx, generate_pdf
from sop_studio.utils.html_export import generate_html
from sop_studio.utils.sop_content import SECTION_ORDER, SOPContent, is_structured, load_content
from sop_studio.utils.xlsx_export import generate_xlsx

APP_TITLE = "SOP Studio"
STATUSES = ["draft", "approved", "archived"]
CONTENT_TYPES = ["dialogue", "article", "social", "email", "speech", "story"]

DOWNLOADS = [
    ("📄 PDF", "pdf", "application/pdf", generate_pdf, ""),
    ("📝 Word", "docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", generate_docx, ""),
    ("🌐 HTML", "html", "text/html", generate_html, ""),
    ("📊 Excel checklist", "xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", generate_xlsx, "_checklist"),
]


def init_session_state() -> None:
    if "generated" not in st.session_state:
        st.session_state.generated = None  # {"title", "description", "content", "options"}
    if "selected_sop" not in st.session_state:
        st.session_state.selected_sop = None
    if "chat_persona" not in st.session_state:
        st.session_state.chat_persona = None
    if "chat_history" not in st.session_state:
        st.session_state.chat_history = []  # [{"role", "content"}]
    if "edit_persona" not in st.session_state:
        st.session_state.edit_persona = None


def _request_rerun() -> None:
    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if rerun:
        rerun()


def render_content_preview(content: Any) -> None:
    if not is_structured(content):
        st.json(content)
        return
    sop = SOPContent.from_dict(content)
    for number, (title, attr, _key) in enumerate(SECTION_ORDER, start=1):
        value = getattr(sop, attr)
        if not value:
            continue
        st.subheader(f"{number}. {title}")
        if attr in ("purpose", "scope"):
            st.write(value)
        elif attr == "procedures":
            for step in value:
                st.markdown(f"**Step {step.step}: {step.action}**")
                if step.details:
                    st.write(step.details)
                if step.warning:
                    st.warning(f"⚠ WARNING: {step.warning}")
        else:
            st.markdown("\n".join(f"- {item}" for item in value))


# ----------------------------------------------------------------- SOP pages


def ui_generate() -> None:
    st.header("Generate SOP")
    industries = list(INDUSTRY_TEMPLATES)
    tones = list(TONE_TEMPLATES)
    languages = list(LANGUAGE_CONFIGS)

    with st.form("generate_form"):
        title = st.text_input("Title")
        description = st.text_area("Description", help="What the procedure covers and who performs it")
        col1, col2, col3 = st.columns(3)
        with col1:
            industry = st.selectbox(
                "Industry", industries, format_func=lambda key: INDUSTRY_TEMPLATES[key].name
            )
        with col2:
            tone = st.selectbox("Tone", tones, format_func=lambda key: TONE_TEMPLATES[key].name)
        with col3:
            language = st.selectbox(
                "Language",
                languages,
                format_func=lambda key: f"{LANGUAGE_CONFIGS[key].flag} {LANGUAGE_CONFIGS[key].native_name}",
            )
        frameworks = st.multiselect("Regulatory frameworks", INDUSTRY_TEMPLATES[industry].frameworks)
        submitted = st.form_submit_button("⚡ Generate")

    if submitted:
        if not title.strip() or not description.strip():
            st.error("Title and description are required")
        else:
            with st.spinner("Generating SOP..."):
                try:
                    content = generate_sop(
                        title,
                        description,
                        industry=industry,
                        tone=tone,
                        language=language,
                        regulatory_framework=frameworks,
                    )
                except GenerationError as exc:
                    st.error(str(exc))
                else:
                    st.session_state.generated = {
                        "title": title,
                        "description": description,
                        "content": content.to_dict(),
                        "options": {
                            "industry": industry,
                            "tone": tone,
                            "language": language,
                            "regulatory_framework": frameworks,
                        },
                    }

    generated = st.session_state.generated
    if not generated:
        return

    st.markdown("---")
    render_content_preview(generated["content"])
    category = st.text_input("Category (optional)", key="generated_category")
    if st.button("💾 Save to library"):
        with session_scope() as session:
            sop = repository.create_sop(
                session,
                title=generated["title"],
                description=generated["description"],
                content=generated["content"],
                category=category or None,
                **generated["options"],
            )
            st.session_state.selected_sop = sop.id
        st.session_state.generated = None
        st.success("SOP saved")


def ui_library() -> None:
    st.header("SOP Library")
    col1, col2 = st.columns(2)
    with col1:
        search = st.text_input("Search title or description")
    with col2:
        category = st.text_input("Category filter")

    with session_scope() as session:
        sops = repository.list_sops(session, search=search or None, category=category or None)

    if not sops:
        st.info("No SOPs found")
        return

    for sop in sops:
        cols = st.columns([4, 1, 1, 1])
        cols[0].markdown(f"**{sop.title}**  \n{sop.description or ''}")
        cols[1].write(sop.status.upper())
        cols[2].write(f"v{sop.version}")
        if cols[3].button("Open", key=f"open_{sop.id}"):
            st.session_state.selected_sop = sop.id
            _request_rerun()

    if st.session_state.selected_sop:
        st.markdown("---")
        ui_editor(st.session_state.selected_sop)


def ui_editor(sop_id: str) -> None:
    try:
        with session_scope() as session:
            sop = repository.get_sop(session, sop_id)
    except NotFoundError:
        st.session_state.selected_sop = None
        st.warning("SOP not found")
        return

    st.subheader(f"✏️ {sop.title}")
    with st.form(f"edit_{sop.id}"):
        title = st.text_input("Title", value=sop.title)
        description = st.text_area("Description", value=sop.description or "")
        col1, col2, col3 = st.columns(3)
        with col1:
            category = st.text_input("Category", value=sop.category or "")
        with col2:
            status = st.selectbox(
                "Status", STATUSES, index=STATUSES.index(sop.status) if sop.status in STATUSES else 0
            )
        with col3:
            version = st.text_input("Version", value=sop.version)
        raw_content = st.text_area(
            "Content (JSON)",
            value=json.dumps(load_content(sop.content), ensure_ascii=False, indent=2),
            height=400,
        )
        saved = st.form_submit_button("💾 Save")

    if saved:
        try:
            content = json.loads(raw_content)
        except json.JSONDecodeError as exc:
            st.error(f"Content is not valid JSON: {exc}")
        else:
            with session_scope() as session:
                sop = repository.update_sop(
                    session,
                    sop.id,
                    title=title,
                    description=description,
                    category=category or None,
                    status=status,
                    version=version,
                    content=content,
                )
            st.success("SOP updated")

    with st.expander("Preview", expanded=False):
        render_content_preview(load_content(sop.content))

    st.markdown("**Export**")
    cols = st.columns(len(DOWNLOADS))
    for col, (label, ext, mime, render, suffix) in zip(cols, DOWNLOADS):
        try:
            data = render(sop)
        except ExportError as exc:
            col.error(str(exc))
            continue
        col.download_button(label, data=data, file_name=export_filename(sop, ext, suffix), mime=mime)

    if st.button("🗑️ Delete SOP", type="secondary"):
        with session_scope() as session:
            repository.delete_sop(session, sop.id)
        st.session_state.selected_sop = None
        _request_rerun()


# ------------------------------------------------------------- persona pages


def _parse_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def persona_form_defaults(persona: Any = None) -> Dict[str, Any]:
    """Field values for the persona form, prefilled from a stored persona when given."""
    if persona is None:
        return {
            "name": "",
            "occupation": "",
            "age": 0,
            "description": "",
            "background": "",
            "speaking_style": "",
            "vocabulary": "",
            "catchphrases": "",
            "philosophy": "",
            "principles": "",
            "mood": "",
            "humor": "",
            "category": "custom",
        }
    voice = load_attributes(persona.voice_profile, "voiceProfile")
    beliefs = load_attributes(persona.beliefs, "beliefs")
    tone = load_attributes(persona.tone_profile, "toneProfile")
    return {
        "name": persona.name,
        "occupation": persona.occupation or "",
        "age": persona.age or 0,
        "description": persona.description or "",
        "background": persona.background or "",
        "speaking_style": voice.get("speakingStyle") or "",
        "vocabulary": voice.get("vocabularyLevel") or "",
        "catchphrases": "\n".join(voice.get("catchphrases") or []),
        "philosophy": beliefs.get("philosophy") or "",
        "principles": "\n".join(beliefs.get("principles") or []),
        "mood": tone.get("defaultMood") or "",
        "humor": tone.get("humorStyle") or "",
        "category": persona.category or "",
    }


def persona_values(fields: Dict[str, Any], persona: Any = None) -> Dict[str, Any]:
    """Repository keyword arguments for the submitted form.

    When editing, attribute keys the form does not show are carried over from
    the stored persona.
    """
    voice = load_attributes(persona.voice_profile, "voiceProfile") if persona is not None else {}
    beliefs = load_attributes(persona.beliefs, "beliefs") if persona is not None else {}
    tone = load_attributes(persona.tone_profile, "toneProfile") if persona is not None else {}
    voice.update(
        speakingStyle=fields["speaking_style"],
        vocabularyLevel=fields["vocabulary"],
        catchphrases=_parse_lines(fields["catchphrases"]),
    )
    beliefs.update(philosophy=fields["philosophy"], principles=_parse_lines(fields["principles"]))
    tone.update(defaultMood=fields["mood"], humorStyle=fields["humor"])
    return {
        "name": fields["name"].strip(),
        "occupation": fields["occupation"] or None,
        "age": fields["age"] or None,
        "description": fields["description"] or None,
        "background": fields["background"] or None,
        "voice_profile": voice,
        "beliefs": beliefs,
        "tone_profile": tone,
        "category": fields["category"] or None,
    }


def _persona_form(key: str, defaults: Dict[str, Any], submit_label: str) -> Tuple[bool, Dict[str, Any]]:
    fields: Dict[str, Any] = {}
    with st.form(key):
        fields["name"] = st.text_input("Name", value=defaults["name"])
        fields["occupation"] = st.text_input("Occupation", value=defaults["occupation"])
        fields["age"] = st.number_input("Age", min_value=0, max_value=130, value=int(defaults["age"]))
        fields["description"] = st.text_area("Short description", value=defaults["description"])
        fields["background"] = st.text_area("Background", value=defaults["background"])
        st.markdown("**Voice**")
        fields["speaking_style"] = st.text_input("Speaking style", value=defaults["speaking_style"])
        fields["vocabulary"] = st.text_input("Vocabulary level", value=defaults["vocabulary"])
        fields["catchphrases"] = st.text_area("Catchphrases (one per line)", value=defaults["catchphrases"])
        st.markdown("**Beliefs**")
        fields["philosophy"] = st.text_input("Philosophy", value=defaults["philosophy"])
        fields["principles"] = st.text_area("Principles (one per line)", value=defaults["principles"])
        st.markdown("**Tone**")
        fields["mood"] = st.text_input("Default mood", value=defaults["mood"])
        fields["humor"] = st.text_input("Humor style", value=defaults["humor"])
        fields["category"] = st.text_input("Category", value=defaults["category"])
        submitted = st.form_submit_button(submit_label)
    return submitted, fields


def ui_persona_library() -> None:
    st.header("Persona Library")
    if st.button("Install pre-built personas"):
        with session_scope() as session:
            created = repository.seed_personas(session, prebuilt_profiles())
        st.success(f"Installed {len(created)} personas")

    with session_scope() as session:
        summaries = repository.list_personas(session)

    if not summaries:
        st.info("No personas yet. Create one or install the pre-built set.")
        return

    for summary in summaries:
        persona = summary.persona
        with st.expander(f"{persona.name} · {persona.occupation or 'Persona'}"):
            st.write(persona.description or "")
            st.caption(
                f"{summary.responses} responses · {summary.scenarios} scenarios · used {persona.usage_count} times"
            )
            cols = st.columns(3)
            if cols[0].button("💬 Chat", key=f"chat_{persona.id}"):
                st.session_state.chat_persona = persona.id
                st.session_state.chat_history = []
                _request_rerun()
            if cols[1].button("✏️ Edit", key=f"edit_{persona.id}"):
                st.session_state.edit_persona = persona.id
            if not persona.is_prebuilt and cols[2].button("🗑️ Delete", key=f"del_{persona.id}"):
                with session_scope() as session:
                    repository.delete_persona(session, persona.id)
                _request_rerun()
            if st.session_state.edit_persona == persona.id:
                ui_persona_edit(persona)


def ui_persona_edit(persona: Any) -> None:
    submitted, fields = _persona_form(f"edit_form_{persona.id}", persona_form_defaults(persona), "Save changes")
    if not submitted:
        return
    if not fields["name"].strip():
        st.error("Name is required")
        return
    try:
        with session_scope() as session:
            repository.update_persona(session, persona.id, **persona_values(fields, persona))
    except NotFoundError:
        st.warning("Persona not found")
        return
    st.session_state.edit_persona = None
    st.success(f"Persona {fields['name']} updated")
    _request_rerun()


def ui_persona_create() -> None:
    st.header("Create Persona")
    submitted, fields = _persona_form("persona_form", persona_form_defaults(), "Create")

    if not submitted:
        return
    if not fields["name"].strip():
        st.error("Name is required")
        return

    with session_scope() as session:
        persona = repository.create_persona(session, **persona_values(fields))
        st.session_state.chat_persona = persona.id
        st.session_state.chat_history = []
    st.success(f"Persona {fields['name']} created")


def ui_persona_chat() -> None:
    st.header("Persona Chat")
    persona_id = st.session_state.chat_persona
    if not persona_id:
        st.info("Pick a persona in the library to start chatting")
        return

    try:
        with session_scope() as session:
            persona = repository.get_persona(session, persona_id)
    except NotFoundError:
        st.session_state.chat_persona = None
        st.warning("Persona not found")
        return

    st.subheader(persona.name)
    col1, col2 = st.columns(2)
    with col1:
        content_type = st.selectbox("Content type", CONTENT_TYPES)
    with col2:
        audience = st.text_input("Target audience (optional)")
    scenario = st.text_input("Scenario (optional)")

    history: List[Dict[str, str]] = st.session_state.chat_history
    for message in history:
        with st.chat_message(message["role"]):
            st.markdown(message["content"])

    prompt = st.chat_input(f"Message {persona.name}")
    if not prompt:
        return

    with st.chat_message("user"):
        st.markdown(prompt)
    with st.spinner("Thinking..."):
        try:
            reply = generate_persona_response(
                PersonaProfile.from_record(persona),
                prompt,
                content_type=content_type,
                scenario=scenario or None,
                target_audience=audience or None,
                conversation_history=history,
            )
        except GenerationError as exc:
            st.error(str(exc))
            return

    with session_scope() as session:
        record = repository.get_persona(session, persona_id)
        repository.record_persona_response(
            session,
            record,
            prompt=prompt,
            response=reply,
            content_type=content_type,
            scenario=scenario,
            target_audience=audience,
        )
    history.append({"role": "user", "content": prompt})
    history.append({"role": "assistant", "content": reply})
    with st.chat_message("assistant"):
        st.markdown(reply)


def main():
    st.set_page_config(page_title=APP_TITLE, page_icon="📋", layout="wide", initial_sidebar_state="expanded")
    configure_logging()
    init_session_state()

    st.title(f"📋 {APP_TITLE}")

    with st.sidebar:
        st.header("Navigation")
        area = st.radio("Area", ["SOP Generator", "Persona GPT"])

    if area == "SOP Generator":
        tabs = st.tabs(["⚡ Generate", "📚 Library"])
        with tabs[0]:
            ui_generate()
        with tabs[1]:
            ui_library()
    else:
        tabs = st.tabs(["👥 Library", "➕ Create", "💬 Chat"])
        with tabs[0]:
            ui_persona_library()
        with tabs[1]:
            ui_persona_create()
        with tabs[2]:
            ui_persona_chat()


if __name__ == "__main__":
    main()
