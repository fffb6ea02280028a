"""Bot mention detection for strmly_bot.

Decides, without any network call, whether a chat message addresses the
donation bot and should go through extraction at all.
"""

from dataclasses import dataclass

__all__ = [
    "DEFAULT_BOT_HANDLE",
    "MentionDetector",
    "MentionResult",
]

DEFAULT_BOT_HANDLE = "@ly bot"


@dataclass(frozen=True)
class MentionResult:
    """Result of a mention check."""

    mentioned: bool
    body: str
    """Trimmed body, used as extraction input"""


class MentionDetector:
    """Detects an addressed mention of the donation bot.

    The handle must appear verbatim (case-sensitive) and must not run on
    into a longer word: "@ly botanist" does not address "@ly bot". There
    is no tokenizing or fuzzy matching.

    Example:
        detector = MentionDetector("@ly bot")
        detector.detect("@ly bot donate 0.1 eth").mentioned  # True
        detector.detect("@LY BOT donate 0.1 eth").mentioned  # False
        detector.detect("@ly botanist here").mentioned  # False
    """

    def __init__(self, handle: str = DEFAULT_BOT_HANDLE) -> None:
        if not handle.strip():
            raise ValueError("bot handle must not be empty")
        self._handle = handle

    @property
    def handle(self) -> str:
        return self._handle

    def detect(self, body: str) -> MentionResult:
        """Check whether body addresses the bot.

        Args:
            body: Raw, already-persisted message text

        Returns:
            MentionResult with the trimmed body
        """
        return MentionResult(mentioned=self._contains_handle(body), body=body.strip())

    def _contains_handle(self, body: str) -> bool:
        start = body.find(self._handle)
        while start != -1:
            end = start + len(self._handle)
            if not _continues_word(self._handle[-1], body[end : end + 1]):
                return True
            start = body.find(self._handle, start + 1)
        return False


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _continues_word(last: str, following: str) -> bool:
    """True when following extends the word the handle ends with."""
    return bool(following) and _is_word_char(last) and _is_word_char(following)
