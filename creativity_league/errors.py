class LeagueError(Exception):
    pass


class ValidationError(LeagueError):
    """Rejected user input. The message is shown to the user as-is."""


class StateError(LeagueError):
    """Operation not allowed in the current state."""
