"""
Error taxonomy for the trainer.
"""


class TrainerError(Exception):
    """Base class for trainer errors"""


class InvalidMove(TrainerError, ValueError):
    """
    An action that cannot be applied to the current table state.

    Raised by the reducer; the state the action was applied to is left
    untouched.
    """

    def __init__(self, message: str, action=None):
        super().__init__(message)
        self.action = action


class MalformedHand(TrainerError, ValueError):
    """Tile/meld count invariant violated by a caller of the hand engine"""


class WallExhausted(TrainerError, RuntimeError):
    """Draw requested from an empty wall"""
