"""Cover art adapter."""

from taan_player.infrastructure.images.cover_art import HttpCoverArtFetcher, raw_decoder

__all__ = ["HttpCoverArtFetcher", "raw_decoder"]
