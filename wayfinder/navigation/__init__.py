"""
Navigation session control.

Modules:
    session: NavMode, NavigationSession and the RenderState snapshot
    state_machine: NavigationStateMachine (mode transitions, step countdown,
                   sensor activation and release)
"""

from wayfinder.navigation.session import (
    NavMode,
    NavigationSession,
    RenderState,
)

from wayfinder.navigation.state_machine import NavigationStateMachine

__all__ = [
    "NavMode",
    "NavigationSession",
    "RenderState",
    "NavigationStateMachine",
]
