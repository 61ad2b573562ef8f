from typing import TypeVar

_T = TypeVar("_T")


def split_tokens(text: str, separator: str) -> list[str]:
    """Splits text, trimming each token and dropping the empty ones."""
    tokens = (token.strip() for token in text.split(separator))
    return [token for token in tokens if token]


def ensure_not_none(value: _T | None, *, err: str) -> _T:
    if value is None:
        raise ValueError(err)
    return value
