import streamlit as st

from components.banners import notify_success, report_failure
from services.monitoring import init_monitoring
from services.playlists import add_clips, create_playlist, delete_playlist, list_playlists, move_clip, remove_clip
from services.portal import list_players
from services.repository import Repository

st.set_page_config(page_title="Playlists", page_icon="🎞️", layout="wide")
init_monitoring()

st.title("🎞️ Playlists")
repo = Repository()

try:
    players = list_players(repo, visible_only=False)
except Exception as e:
    report_failure("Loading players", e)
    st.stop()
if not players:
    st.info("Add a player first.")
    st.stop()

player = st.sidebar.selectbox("Player", players, format_func=lambda p: p.name)

with st.sidebar.form("new_playlist", clear_on_submit=True):
    name = st.text_input("New playlist")
    if st.form_submit_button("Create"):
        try:
            create_playlist(repo, player.id, name)
        except Exception as e:
            report_failure("Creating playlist", e)
        else:
            notify_success("Playlist created")
            st.rerun()

try:
    playlists = list_playlists(repo, player.id)
except Exception as e:
    report_failure("Loading playlists", e)
    st.stop()
if not playlists:
    st.caption(f"{player.name} has no playlists yet.")
    st.stop()

playlist = st.selectbox("Playlist", playlists, format_func=lambda p: f"{p.name} ({len(p.clips)} clips)")

for i, clip in enumerate(sorted(playlist.clips, key=lambda c: c.order)):
    c1, c2, c3, c4 = st.columns([6, 1, 1, 1])
    c1.markdown(f"{clip.order}. [{clip.name}]({clip.video_url})" if clip.video_url else f"{clip.order}. {clip.name}")
    for col, label, step in ((c2, "▲", -1), (c3, "▼", 1)):
        if col.button(label, key=f"mv_{i}_{step}"):
            try:
                move_clip(repo, playlist.id, i, step)
            except Exception as e:
                report_failure("Reordering clips", e)
            else:
                st.rerun()
    if c4.button("✕", key=f"rm_{i}"):
        try:
            remove_clip(repo, playlist.id, clip.name)
        except Exception as e:
            report_failure("Removing clip", e)
        else:
            notify_success("Clip removed")
            st.rerun()

st.divider()
with st.form("add_clips", clear_on_submit=True):
    st.markdown("**Add clips** · one per line as `name | video URL`")
    text = st.text_area("Clips", label_visibility="collapsed")
    if st.form_submit_button("Add to playlist"):
        clips = []
        for line in text.splitlines():
            clip_name, _, url = line.partition("|")
            clips.append({"name": clip_name.strip(), "video_url": url.strip() or None})
        try:
            add_clips(repo, playlist.id, clips)
        except Exception as e:
            report_failure("Adding clips", e)
        else:
            notify_success("Clips added to playlist")
            st.rerun()

if st.button("Delete playlist"):
    try:
        delete_playlist(repo, playlist.id)
    except Exception as e:
        report_failure("Deleting playlist", e)
    else:
        notify_success("Playlist deleted")
        st.rerun()
