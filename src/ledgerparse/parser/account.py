"""Account name scanning for postings."""

from ledgerparse.domain.entities import Reality
from ledgerparse.utils.scanner import fail

# Always terminate an account name, wherever they appear.
HARD_DELIMITERS = "\t\r\n;"


def parse_account(text: str, pos: int = 0) -> tuple[tuple[str, Reality], int]:
    """Scan an account name that may contain single embedded spaces.

    The name ends at a hard delimiter (tab, CR, LF or ';'), at the first of
    two consecutive spaces, or at the end of the input. Two spaces are the
    conventional separator between the account and its amount.

    Args:
        text: Full input text
        pos: Offset of the first character of the name

    Returns:
        Tuple of ((name, reality), offset just past the name)

    Raises:
        Backtrack: If no name starts at ``pos``
    """
    saw_space = False
    end = pos
    while end < len(text):
        c = text[end]
        if c in HARD_DELIMITERS:
            break
        if c == " ":
            if saw_space:
                end -= 1
                break
            saw_space = True
        else:
            saw_space = False
        end += 1
    name = text[pos:end].rstrip(" ")
    if not name:
        raise fail(pos, "expected account name")
    return (parse_account_reality(name), pos + len(name))


def parse_account_reality(name: str) -> tuple[str, Reality]:
    """Strip structural brackets and report which kind of account it is."""
    if len(name) > 2 and name.startswith("[") and name.endswith("]"):
        return (name[1:-1], Reality.BALANCED_VIRTUAL)
    if len(name) > 2 and name.startswith("(") and name.endswith(")"):
        return (name[1:-1], Reality.UNBALANCED_VIRTUAL)
    return (name, Reality.REAL)
