"""Web API adapter."""

from taan_player.infrastructure.web_api.client import HttpWebApiClient

__all__ = ["HttpWebApiClient"]
