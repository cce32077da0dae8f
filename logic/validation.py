"""
logic/validation.py
Pure logic: validates ticker symbols before any image or AI work happens.
No API calls. No uppercasing (that is a display concern).
"""

import re
from typing import Callable, List, NewType, Optional, Tuple

TickerSymbol = NewType("TickerSymbol", str)

MIN_TICKER_LENGTH = 1
MAX_TICKER_LENGTH = 10

_ALLOWED_CHARS_RE = re.compile(r"[A-Za-z0-9.-]+")


def _length(s: str) -> int:
    # UTF-16 code units, so astral characters (emoji) count twice like in the browser form
    return len(s.encode("utf-16-le", "surrogatepass")) // 2


Rule = Tuple[Callable[[str], bool], str]

# Server boundary: length only.
TICKER_RULES: List[Rule] = [
    (lambda s: _length(s) >= MIN_TICKER_LENGTH, "Ticker symbol must be at least 1 character long."),
    (lambda s: _length(s) <= MAX_TICKER_LENGTH, "Ticker symbol can be at most 10 characters long."),
]

# Form boundary: length + character class.
TICKER_FORM_RULES: List[Rule] = [
    (lambda s: _length(s) >= MIN_TICKER_LENGTH, "Ticker symbol is required."),
    (lambda s: _length(s) <= MAX_TICKER_LENGTH, "Ticker symbol must be 10 characters or less."),
    (lambda s: bool(_ALLOWED_CHARS_RE.fullmatch(s)), "Ticker symbol contains invalid characters."),
]


class TickerValidationError(ValueError):
    """
    Raised when a ticker breaks one or more rules.

    `messages` keeps every violated rule in declaration order;
    str(error) joins them with ", ".
    """

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__(", ".join(self.messages))


def _check(ticker: Optional[str], rules: List[Rule]) -> TickerSymbol:
    value = "" if ticker is None else ticker
    failed = [message for passes, message in rules if not passes(value)]
    if failed:
        raise TickerValidationError(failed)
    return TickerSymbol(value)


def validate_ticker(ticker: Optional[str]) -> TickerSymbol:
    """
    Validates a ticker at the server boundary (length 1-10).

    Returns:
        the ticker unchanged, typed as TickerSymbol.

    Raises:
        TickerValidationError (a ValueError) if the ticker is invalid.
    """
    return _check(ticker, TICKER_RULES)


def validate_ticker_form(ticker: Optional[str]) -> TickerSymbol:
    """
    Stricter check used where the user types the symbol:
    length 1-10 and only letters, digits, "." or "-".
    """
    return _check(ticker, TICKER_FORM_RULES)
