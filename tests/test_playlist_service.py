"""
Tynda Backend — Playlist Service Unit Tests
============================================

What:  Tests for PlaylistService ownership and membership logic.
How:   Mock DB sessions; `execute` side effects are queued in call order.

What we test:
    ✅ Name validation (required, trimmed, 100-character limit)
    ✅ add_track deduplicates and checks the track before the playlist
    ✅ remove_track is a no-op for non-members
    ✅ Unowned / missing playlists raise NotFoundError
    ✅ tracksData preserves order and skips dangling ids
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from conftest import make_playlist, make_result, make_track
from tynda.auth import RequestContext
from tynda.exceptions import NotFoundError, ValidationError
from tynda.schemas.playlist import PlaylistCreate, PlaylistTrackAdd, PlaylistUpdate
from tynda.services.playlist_service import PlaylistService


def user_ctx() -> RequestContext:
    return RequestContext(user_id=uuid4(), role="user")


def admin_ctx() -> RequestContext:
    return RequestContext(user_id=uuid4(), role="admin")


class TestPlaylistCreate:

    @pytest.mark.asyncio
    async def test_name_required(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await PlaylistService(mock_db_session).create_playlist(
                user_ctx(), PlaylistCreate(name="   ")
            )
        assert exc_info.value.message == "Playlist name is required"

    @pytest.mark.asyncio
    async def test_name_too_long(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await PlaylistService(mock_db_session).create_playlist(
                user_ctx(), PlaylistCreate(name="x" * 101)
            )
        assert exc_info.value.message == "Name must be 100 characters or less"

    @pytest.mark.asyncio
    async def test_limit_applies_after_trimming(self, mock_db_session):
        added = []
        mock_db_session.add = MagicMock(side_effect=added.append)

        async def assign_id():
            added[0].id = uuid4()
        mock_db_session.flush.side_effect = assign_id

        ctx = user_ctx()
        result = await PlaylistService(mock_db_session).create_playlist(
            ctx, PlaylistCreate(name="  " + "x" * 100 + "  ")
        )

        assert len(result.name) == 100
        assert result.user_id == ctx.user_id
        assert result.tracks == []


class TestPlaylistUpdate:

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await PlaylistService(mock_db_session).update_playlist(
                user_ctx(), str(uuid4()), PlaylistUpdate(name="")
            )
        assert exc_info.value.message == "Playlist name cannot be empty"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unowned_is_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)

        with pytest.raises(NotFoundError) as exc_info:
            await PlaylistService(mock_db_session).update_playlist(
                user_ctx(), str(uuid4()), PlaylistUpdate(description="new")
            )
        assert exc_info.value.message == "Playlist not found"


class TestPlaylistAddTrack:

    @pytest.mark.asyncio
    async def test_invalid_track_id(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await PlaylistService(mock_db_session).add_track(
                user_ctx(), str(uuid4()), PlaylistTrackAdd(track_id="abc")
            )
        assert exc_info.value.message == "Valid track ID is required"

    @pytest.mark.asyncio
    async def test_missing_track_checked_first(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=[make_result(one=None)])

        with pytest.raises(NotFoundError) as exc_info:
            await PlaylistService(mock_db_session).add_track(
                user_ctx(), str(uuid4()), PlaylistTrackAdd(track_id=str(uuid4()))
            )

        assert exc_info.value.message == "Track not found"
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_adds_new_member(self, mock_db_session):
        ctx = user_ctx()
        track = make_track()
        playlist = make_playlist(user_id=ctx.user_id)
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(one=track), make_result(one=playlist)]
        )

        result = await PlaylistService(mock_db_session).add_track(
            ctx, str(playlist.id), PlaylistTrackAdd(track_id=str(track.id))
        )

        assert result.message == "Track added to playlist"
        assert result.track.id == track.id
        assert playlist.tracks == [str(track.id)]

    @pytest.mark.asyncio
    async def test_existing_member_not_duplicated(self, mock_db_session):
        ctx = user_ctx()
        track = make_track()
        other = str(uuid4())
        playlist = make_playlist(user_id=ctx.user_id, tracks=[str(track.id), other])
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(one=track), make_result(one=playlist)]
        )

        await PlaylistService(mock_db_session).add_track(
            ctx, str(playlist.id), PlaylistTrackAdd(track_id=str(track.id))
        )

        assert playlist.tracks == [str(track.id), other]

    @pytest.mark.asyncio
    async def test_unowned_playlist(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(one=make_track()), make_result(one=None)]
        )

        with pytest.raises(NotFoundError) as exc_info:
            await PlaylistService(mock_db_session).add_track(
                admin_ctx(), str(uuid4()), PlaylistTrackAdd(track_id=str(uuid4()))
            )
        assert exc_info.value.message == "Playlist not found"


class TestPlaylistRemoveTrack:

    @pytest.mark.asyncio
    async def test_malformed_ids(self, mock_db_session):
        service = PlaylistService(mock_db_session)

        with pytest.raises(ValidationError) as exc_info:
            await service.remove_track(user_ctx(), "bad", str(uuid4()))
        assert exc_info.value.message == "Invalid ID format"

        with pytest.raises(ValidationError):
            await service.remove_track(user_ctx(), str(uuid4()), "bad")

    @pytest.mark.asyncio
    async def test_non_member_is_noop(self, mock_db_session):
        ctx = user_ctx()
        members = [str(uuid4()), str(uuid4())]
        playlist = make_playlist(user_id=ctx.user_id, tracks=list(members))
        mock_db_session.execute = AsyncMock(return_value=make_result(one=playlist))

        result = await PlaylistService(mock_db_session).remove_track(
            ctx, str(playlist.id), str(uuid4())
        )

        assert result.message == "Track removed from playlist"
        assert playlist.tracks == members

    @pytest.mark.asyncio
    async def test_removes_member_keeps_order(self, mock_db_session):
        ctx = user_ctx()
        a, b, c = (str(uuid4()) for _ in range(3))
        playlist = make_playlist(user_id=ctx.user_id, tracks=[a, b, c])
        mock_db_session.execute = AsyncMock(return_value=make_result(one=playlist))

        await PlaylistService(mock_db_session).remove_track(ctx, str(playlist.id), b)

        assert playlist.tracks == [a, c]


class TestPlaylistGet:

    @pytest.mark.asyncio
    async def test_tracks_data_in_order_skipping_dangling(self, mock_db_session):
        ctx = user_ctx()
        first, second = make_track(title="One"), make_track(title="Two")
        dangling = str(uuid4())
        playlist = make_playlist(
            user_id=ctx.user_id,
            tracks=[str(second.id), dangling, "not-a-uuid", str(first.id)],
        )
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(one=playlist), make_result(many=[first, second])]
        )

        detail = await PlaylistService(mock_db_session).get_playlist(ctx, str(playlist.id))

        assert detail.is_owner is True
        assert [t.title for t in detail.tracks_data] == ["Two", "One"]
        assert len(detail.tracks) == 4

    @pytest.mark.asyncio
    async def test_admin_reads_foreign_playlist(self, mock_db_session):
        playlist = make_playlist()
        mock_db_session.execute = AsyncMock(side_effect=[make_result(one=playlist)])

        detail = await PlaylistService(mock_db_session).get_playlist(admin_ctx(), str(playlist.id))

        assert detail.is_owner is False
        assert detail.tracks_data == []

    @pytest.mark.asyncio
    async def test_invalid_id(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await PlaylistService(mock_db_session).get_playlist(user_ctx(), "123")
        assert exc_info.value.message == "Invalid playlist ID"


class TestPlaylistDelete:

    @pytest.mark.asyncio
    async def test_unowned_is_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)

        with pytest.raises(NotFoundError):
            await PlaylistService(mock_db_session).delete_playlist(user_ctx(), str(uuid4()))

    @pytest.mark.asyncio
    async def test_success(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=1)

        result = await PlaylistService(mock_db_session).delete_playlist(user_ctx(), str(uuid4()))

        assert result.message == "Playlist deleted successfully"
