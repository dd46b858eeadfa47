"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters or external collaborators. These are
the "ports" in hexagonal architecture.
"""

from taan_player.application.interfaces.cover_art import CoverArtFetcher, ImageDecoder
from taan_player.application.interfaces.credential_store import CredentialStore
from taan_player.application.interfaces.interactive_login import InteractiveLogin
from taan_player.application.interfaces.playback_engine import PlaybackEngine
from taan_player.application.interfaces.streaming_session import StreamingSession
from taan_player.application.interfaces.web_api import WebApiClient

__all__ = [
    "CoverArtFetcher",
    "CredentialStore",
    "ImageDecoder",
    "InteractiveLogin",
    "PlaybackEngine",
    "StreamingSession",
    "WebApiClient",
]
