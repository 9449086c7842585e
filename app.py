import streamlit as st

from app.state.selection import editor_changed, ensure_session_state, tile_key
from shinydex.config import apply_config, load_config
from shinydex.interaction import Tracker
from shinydex.render import tile_image
from shinydex.snapshot import SnapshotExporter
from shinydex.stats import stats_frame
from shinydex.view import Page

CONFIG = load_config()
GRID_COLUMNS = 8
st.set_page_config(page_title="Shiny Dex", layout="wide")


def on_toggle_desaturate() -> None:
    tracker = st.session_state.tracker
    tracker.set_desaturate(st.session_state["desaturate"])


def on_save_image() -> None:
    tracker = st.session_state.tracker
    st.session_state.export_result = SnapshotExporter().export(tracker.page)


def render_options(tracker: Tracker) -> None:
    bar = tracker.page.options_bar
    if bar is None:
        return
    st.sidebar.header("Options")
    if bar.toggle_checked is not None:
        st.sidebar.toggle(
            "Grey out items with a count of 1",
            value=tracker.config.desaturate,
            key="desaturate",
            on_change=on_toggle_desaturate,
        )
    if bar.save_button is not None:
        st.sidebar.button(
            bar.save_button.label,
            disabled=bar.save_button.disabled,
            on_click=on_save_image,
        )
    result = st.session_state.get("export_result")
    if result is not None:
        if result.ok:
            st.sidebar.download_button(
                label=f"Download {result.filename}",
                data=result.data,
                file_name=result.filename,
                mime="image/png",
            )
        else:
            st.sidebar.error(result.error)

    with st.sidebar.expander("Region progress", expanded=False):
        df = stats_frame(tracker.stats)
        st.dataframe(df, hide_index=True, use_container_width=True)
        st.download_button(
            label="Download progress",
            data=df.to_csv(index=False).encode("utf-8"),
            file_name="shiny_dex_progress.csv",
            mime="text/csv",
        )
    if st.sidebar.button("Reset all"):
        tracker.reset()
        st.rerun()


def render_stats_bar(page: Page) -> None:
    bar = page.stats_bar
    if bar is None:
        return
    cols = st.columns(3)
    if bar.total_progress is not None:
        cols[0].metric("Progress", bar.total_progress.text)
    if bar.total_count is not None:
        cols[1].metric("Shiny total", bar.total_count.text)
    if bar.percentage is not None:
        cols[2].metric("Complete", bar.percentage.text)


def render_tile(tracker: Tracker, tile, region_idx: int) -> None:
    img = tile_image(tile)
    if img is not None:
        st.image(img, caption=tile.title, use_container_width=True)
    else:
        st.caption(tile.title)
    st.button(
        "★" if tile.obtained else "☆",
        key=tile_key("tile", region_idx, tile.item_id),
        help="Toggle obtained",
        on_click=tracker.tap_tile,
        args=(tile.item_id,),
    )
    if tile.editor is not None:
        key = tile_key("count", region_idx, tile.item_id)
        st.text_input(
            "Count",
            value=tile.editor.value,
            key=key,
            on_change=editor_changed,
            args=(st, key),
            label_visibility="collapsed",
        )
        st.button(
            "OK",
            key=tile_key("ok", region_idx, tile.item_id),
            on_click=editor_changed,
            args=(st, key),
        )
        st.button(
            "Cancel",
            key=tile_key("cancel", region_idx, tile.item_id),
            on_click=tracker.cancel,
        )
    elif tile.badge_visible:
        st.button(
            f"× {tile.badge_text}",
            key=tile_key("badge", region_idx, tile.item_id),
            help="Edit count",
            on_click=tracker.tap_badge,
            args=(tile.item_id,),
        )


def main() -> None:
    apply_config(CONFIG)
    tracker = ensure_session_state(st)
    page = tracker.page

    st.title(page.title)
    if page.error is not None:
        st.error(page.error)
        return

    render_options(tracker)
    for region_idx, region in enumerate(page.regions):
        st.subheader(f"{region.name}  ·  {region.progress}")
        cols = st.columns(GRID_COLUMNS)
        for idx, tile in enumerate(region.tiles):
            with cols[idx % GRID_COLUMNS]:
                render_tile(tracker, tile, region_idx)
        st.divider()
    render_stats_bar(page)


if __name__ == "__main__":
    main()
