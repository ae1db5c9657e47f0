"""Streamlit timeline dashboard for ArtPivot.

Vertical timeline of periods and artworks, with a document import panel.

Run: streamlit run artpivot/dashboard/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from artpivot.extractors.document import DocumentExtractor, MissingCredentialError
from artpivot.extractors.llm_fallback import LLMExtractionError
from artpivot.extractors.reader import DocumentReadError, UnsupportedFormatError, read_document_text
from artpivot.settings import get_settings
from artpivot.storage.database import Database
from artpivot.storage.uploads import temporary_upload
from artpivot.timeline import build_scale, format_year
from artpivot.validation.schemas import AIConfig, ArtworkCreate

NO_PERIOD = "(no period)"
MARKER_COLOR = "#1B2A4A"


# ── Data loading ──────────────────────────────────────────────────────────

@st.cache_resource
def get_database():
    db = Database(get_settings().database_path)
    db.create_tables()
    return db


@st.cache_data(ttl=30)
def load_periods_df() -> pd.DataFrame:
    rows = [
        {"id": p.id, "name": p.name, "start_year": p.start_year, "end_year": p.end_year,
         "color": p.color, "description": p.description, "image_url": p.image_url}
        for p in get_database().list_periods()
    ]
    return pd.DataFrame(rows) if rows else pd.DataFrame()


@st.cache_data(ttl=30)
def load_artworks_df() -> pd.DataFrame:
    db = get_database()
    names = {p.id: p.name for p in db.list_periods()}
    rows = [
        {"id": a.id, "title": a.title, "artist": a.artist, "year": a.year,
         "label": format_year(a.year), "description": a.description,
         "image_url": a.image_url, "period": names.get(a.period_id, NO_PERIOD)}
        for a in db.list_artworks()
    ]
    return pd.DataFrame(rows) if rows else pd.DataFrame()


# ── Figure ────────────────────────────────────────────────────────────────

def timeline_figure(periods: pd.DataFrame, artworks: pd.DataFrame) -> go.Figure:
    """Periods as coloured bands on the left, artworks as markers on the right.

    Earliest years are at the top.
    """
    scale = build_scale(
        list(zip(periods["start_year"], periods["end_year"])) if not periods.empty else [],
        artworks["year"].tolist() if not artworks.empty else [],
    )
    fig = go.Figure()

    for _, p in periods.iterrows():
        fig.add_shape(
            type="rect", x0=0, x1=0.9, y0=p["start_year"], y1=p["end_year"],
            fillcolor=p["color"], opacity=0.35, line_width=0,
        )
        fig.add_annotation(
            x=0.45, y=(p["start_year"] + p["end_year"]) / 2, text=f"<b>{p['name']}</b>",
            showarrow=False, font={"size": 12},
        )

    if not artworks.empty:
        fig.add_trace(go.Scatter(
            x=[1.5] * len(artworks),
            y=artworks["year"],
            mode="markers+text",
            marker={"size": 10, "color": MARKER_COLOR},
            text=artworks["title"],
            textposition="middle right",
            customdata=artworks[["artist", "label", "period"]],
            hovertemplate="<b>%{text}</b><br>%{customdata[0]}<br>%{customdata[1]}"
                          "<br>%{customdata[2]}<extra></extra>",
        ))

    tick_years = list(range(scale.min_year, scale.max_year + 1, max(1, scale.total_years // 10)))
    fig.update_layout(
        height=900,
        showlegend=False,
        margin={"l": 80, "r": 20, "t": 20, "b": 20},
        xaxis={"visible": False, "range": [0, 4]},
        yaxis={
            "range": [scale.max_year, scale.min_year],
            "tickvals": tick_years,
            "ticktext": [format_year(y) for y in tick_years],
            "gridcolor": "#E2E8F0",
        },
        plot_bgcolor="white",
    )
    return fig


# ── Import panel ──────────────────────────────────────────────────────────

def build_ai_config(api_key: str, model: str, base_url: str) -> AIConfig:
    """Blank inputs fall back to the application settings inside the extractor."""
    return AIConfig(api_key=api_key, model=model, base_url=base_url)


def ai_settings_inputs() -> AIConfig:
    settings = get_settings()
    with st.expander("AI fallback settings"):
        api_key = st.text_input("API key (only needed for AI fallback)", type="password")
        model = st.text_input("Model", placeholder=settings.llm_model)
        base_url = st.text_input("Base URL", placeholder=settings.llm_base_url)
    return build_ai_config(api_key, model, base_url)


def import_panel() -> None:
    st.subheader("Import from document")
    upload = st.file_uploader("Lecture handout (.docx, .txt or .md)", type=["docx", "txt", "md"])
    ai_config = ai_settings_inputs()
    if upload is None or not st.button("Extract"):
        return

    db = get_database()
    settings = get_settings()
    try:
        with temporary_upload(upload, settings.upload_dir, Path(upload.name).suffix) as path:
            text = read_document_text(path, original_name=upload.name)
        result = DocumentExtractor(record_history=db.record_extraction).extract(
            text, ai_config=ai_config, filename=upload.name,
        )
    except (UnsupportedFormatError, DocumentReadError) as e:
        st.error(f"Could not read document: {e}")
        return
    except MissingCredentialError:
        st.error("No IMAGES section found. Enter an API key to use AI extraction.")
        return
    except LLMExtractionError:
        st.error("AI extraction failed. See the server log for details.")
        return

    st.session_state["suggestions"] = result.artworks
    st.success(f"Found {len(result.artworks)} artworks ({result.source}).")


def suggestions_panel(periods: pd.DataFrame) -> None:
    suggestions = st.session_state.get("suggestions")
    if not suggestions:
        return
    st.dataframe(pd.DataFrame(suggestions), use_container_width=True, hide_index=True)

    options = {NO_PERIOD: None}
    if not periods.empty:
        options.update(dict(zip(periods["name"], periods["id"])))
    choice = st.selectbox("Assign to period", list(options))
    if st.button("Add all to catalogue"):
        db = get_database()
        added = 0
        for raw in suggestions:
            try:
                payload = ArtworkCreate.model_validate({**raw, "periodId": options[choice]})
            except ValueError:
                continue
            db.create_artwork(**payload.model_dump())
            added += 1
        st.session_state.pop("suggestions")
        st.cache_data.clear()
        st.success(f"Added {added} artworks.")


# ── Page ──────────────────────────────────────────────────────────────────

def main():
    st.set_page_config(page_title="ArtPivot", page_icon=":art:", layout="wide")
    st.title("ArtPivot")
    st.caption("Art history on a vertical timeline")

    periods_df = load_periods_df()
    artworks_df = load_artworks_df()

    with st.sidebar:
        st.header("Filter")
        period_names = [NO_PERIOD] + (periods_df["name"].tolist() if not periods_df.empty else [])
        selected = st.multiselect("Periods", period_names, default=period_names)
        if not artworks_df.empty:
            artworks_df = artworks_df[artworks_df["period"].isin(selected)]

    if periods_df.empty and artworks_df.empty:
        st.warning("The catalogue is empty. Run `artpivot seed` or import a document.")
    else:
        col_chart, col_detail = st.columns([3, 2])
        with col_chart:
            st.plotly_chart(timeline_figure(periods_df, artworks_df), use_container_width=True)
        with col_detail:
            if not artworks_df.empty:
                title = st.selectbox("Artwork", artworks_df["title"].tolist())
                art = artworks_df[artworks_df["title"] == title].iloc[0]
                st.markdown(f"### {art['title']}")
                st.markdown(f"**{art['artist']}**, {art['label']} &bull; {art['period']}")
                if art["image_url"]:
                    st.image(art["image_url"])
                if art["description"]:
                    st.markdown(art["description"])

    st.divider()
    import_panel()
    suggestions_panel(periods_df)

    st.divider()
    st.subheader("Extraction history")
    history = get_database().list_history(limit=50)
    if history:
        st.dataframe(
            pd.DataFrame([{"file": h.filename, "when": h.created_at} for h in history]),
            use_container_width=True, hide_index=True,
        )
    else:
        st.caption("No documents imported yet.")


if __name__ == "__main__":
    main()
