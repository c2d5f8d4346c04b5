from reelorder.services.schemas.playlist import (
    PlaylistRunRequest,
    PlaylistRunResponse,
    PlaylistTrackRead,
)
__all__ = [
    "PlaylistRunRequest",
    "PlaylistRunResponse",
    "PlaylistTrackRead",
]
