"""Session pickers for non-interactive callers."""

import logging
from collections import deque
from collections.abc import Iterable

from vnc_session_mcp.models import (
    Cancel,
    ConnectExisting,
    ConnectNew,
    KillExisting,
    SelectionDecision,
)
from vnc_session_mcp.utils.validation import validate_session_id

logger = logging.getLogger(__name__)


def parse_action(action: str) -> SelectionDecision:
    """Parse a picker action string.

    Formats:
        - "new" -> ConnectNew
        - "cancel" -> Cancel
        - "connect:<session>" -> ConnectExisting
        - "kill:<session>" -> KillExisting

    Raises:
        ValueError: If the action or its session is invalid
    """
    action = action.strip()
    verb, sep, session = action.partition(":")
    verb = verb.lower()

    if not sep:
        if verb == "new":
            return ConnectNew()
        if verb == "cancel":
            return Cancel()
    elif verb == "connect":
        return ConnectExisting(validate_session_id(session))
    elif verb == "kill":
        return KillExisting(validate_session_id(session))

    raise ValueError(
        f"Invalid action '{action}'. "
        "Expected 'new', 'cancel', 'connect:<session>' or 'kill:<session>'"
    )


class ScriptedPicker:
    """Picker that replays decisions given up front.

    Each ``present`` call consumes the next decision. Once the script is
    used up every call returns Cancel, so the selection loop always ends.
    """

    def __init__(self, decisions: Iterable[SelectionDecision] = ()) -> None:
        self._pending: deque[SelectionDecision] = deque(decisions)
        self.seen: list[list[str]] = []

    @classmethod
    def from_actions(cls, actions: Iterable[str]) -> "ScriptedPicker":
        """Build a picker from action strings (see parse_action)."""
        return cls(parse_action(action) for action in actions)

    async def present(self, sessions: list[str], host: str) -> SelectionDecision:
        self.seen.append(list(sessions))
        if not self._pending:
            logger.debug("No scripted decision left for %s, cancelling", host)
            return Cancel()
        decision = self._pending.popleft()
        logger.debug("Scripted decision for %s: %r", host, decision)
        return decision
