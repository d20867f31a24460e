"""Rejections raised by the game core.

Every error leaves the session untouched; adapters catch `GameError` and
re-prompt the player.
"""


class GameError(Exception):
    code = "game_error"


class OutOfRange(GameError):
    code = "out_of_range"

    def __init__(self, low: int, high: int):
        super().__init__(f"Enter a number between {low} and {high}.")
        self.low = low
        self.high = high


class AlreadyRevealed(GameError):
    code = "already_revealed"

    def __init__(self):
        super().__init__("The word is already shown.")


class NotYetRevealed(GameError):
    code = "not_yet_revealed"

    def __init__(self):
        super().__init__("Show the word first.")


class InvalidTarget(GameError):
    code = "invalid_target"

    def __init__(self, target=None):
        super().__init__("That player isn’t in this game.")
        self.target = target


class NoSelection(GameError):
    code = "no_selection"

    def __init__(self):
        super().__init__("Pick who you think the imposter is first.")


class StageMismatch(GameError):
    code = "stage_mismatch"

    def __init__(self, expected, actual):
        super().__init__("That action isn’t available right now.")
        self.expected = expected
        self.actual = actual
