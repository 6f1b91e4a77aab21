"""
Player playlists: ordered lists of highlight clips kept in ``playlists``.

Clip ``order`` is always 1..n after any change.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from domain.models import Clip, Playlist

from .monitoring import get_logger
from .portal import save_row
from .repository import Repository

PLAYLISTS = "playlists"

logger = get_logger(__name__)


def list_playlists(repo: Repository, player_id: str) -> List[Playlist]:
    return repo.fetch(Playlist, PLAYLISTS, {"player_id": player_id}, order_by="created_at", descending=True)


def create_playlist(repo: Repository, player_id: str, name: str) -> Playlist:
    if not name or not name.strip():
        raise ValueError("Playlist name is required")
    return save_row(repo, Playlist, PLAYLISTS, {"player_id": player_id, "name": name.strip(), "clips": []})


def delete_playlist(repo: Repository, playlist_id: str) -> None:
    repo.delete(PLAYLISTS, playlist_id)


def _ordered(playlist: Playlist) -> List[Clip]:
    return sorted(playlist.clips, key=lambda c: c.order)


def _store(repo: Repository, playlist_id: str, clips: List[Clip]) -> Playlist:
    renumbered = [c.model_copy(update={"order": i}) for i, c in enumerate(clips, start=1)]
    row = repo.update(PLAYLISTS, playlist_id, {"clips": [c.model_dump() for c in renumbered]})
    return Playlist.model_validate(row)


def add_clips(repo: Repository, playlist_id: str, clips: List[Dict[str, Optional[str]]]) -> Playlist:
    """Append clips (``name`` and ``video_url``) after the current last one.

    Clips already in the playlist are skipped.
    """
    playlist = repo.fetch_one(Playlist, PLAYLISTS, playlist_id)
    existing = {c.name for c in playlist.clips}
    added = [
        Clip(name=c["name"], video_url=c.get("video_url"), order=0)
        for c in clips if c.get("name") and c["name"] not in existing
    ]
    if not added:
        return playlist
    logger.debug(f"playlist {playlist_id}: +{len(added)} clips")
    return _store(repo, playlist_id, _ordered(playlist) + added)


def remove_clip(repo: Repository, playlist_id: str, clip_name: str) -> Playlist:
    playlist = repo.fetch_one(Playlist, PLAYLISTS, playlist_id)
    return _store(repo, playlist_id, [c for c in _ordered(playlist) if c.name != clip_name])


def move_clip(repo: Repository, playlist_id: str, index: int, direction: int) -> Playlist:
    """Swap the clip at ``index`` with its neighbour (-1 up, +1 down).

    Moving past either end leaves the playlist unchanged.
    """
    playlist = repo.fetch_one(Playlist, PLAYLISTS, playlist_id)
    clips = _ordered(playlist)
    target = index + direction
    if not 0 <= index < len(clips) or not 0 <= target < len(clips):
        return playlist
    clips[index], clips[target] = clips[target], clips[index]
    return _store(repo, playlist_id, clips)
