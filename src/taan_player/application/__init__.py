"""
Application Layer

Coordinates the domain with the outside world without depending on any
concrete adapter.

Structure:
- interfaces/: Port interfaces for infrastructure adapters and external collaborators
- services/: Auth coordinator, player event coordinator, command dispatcher, lifecycle
- bridge.py: UI command/update channels
- context.py: Shared session and token state
"""
