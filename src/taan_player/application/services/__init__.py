"""Application services: the coordinators and the task lifecycle around them."""

from taan_player.application.services.auth_coordinator import AuthCoordinator
from taan_player.application.services.command_dispatcher import CommandDispatcher
from taan_player.application.services.lifecycle import PlayerApplication
from taan_player.application.services.player_event_coordinator import PlayerEventCoordinator

__all__ = [
    "AuthCoordinator",
    "CommandDispatcher",
    "PlayerApplication",
    "PlayerEventCoordinator",
]
