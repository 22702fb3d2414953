"""HTTP collaborators: identity service and music/roster web service."""

from .identity import TokenClient  # noqa: F401
from .music import MusicServiceClient, NowPlaying, Track  # noqa: F401

__all__ = ["MusicServiceClient", "NowPlaying", "TokenClient", "Track"]
