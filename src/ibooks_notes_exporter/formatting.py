"""
Compact display forms for book authors and titles.
"""

AUTHOR_SEPARATOR = " & "
TITLE_WIDTH = 30


def is_honorific(word: str) -> bool:
    """Check whether a word looks like a title such as "Dr." or "Jr."."""
    return len(word) <= 3 and word[0].isupper() and word[-1] in ".,"


def get_last_name(name: str) -> str:
    """
    Return a person's last name in parentheses.

    Words are scanned from the end, skipping honorifics. A name made only of
    honorifics gives "()".

        >>> get_last_name("Dr. John Smith Jr.")
        '(Smith)'
    """
    last_name = ""
    for word in reversed(name.split()):
        if not is_honorific(word):
            last_name = word
            break

    last_name = last_name.removesuffix(",")
    last_name = last_name.removesuffix(".")

    return f"({last_name})"


def get_last_names(names: str) -> str:
    """Shorten an author field holding one or more names joined by " & "."""
    name_list = names.split(AUTHOR_SEPARATOR)

    if len(name_list) == 1:
        return get_last_name(name_list[0])

    if len(name_list) == 2:
        return get_last_name(name_list[0]) + AUTHOR_SEPARATOR + get_last_name(name_list[1])

    first_name, *others = name_list
    last_names = [get_last_name(name) for name in others]
    return get_last_name(first_name) + AUTHOR_SEPARATOR + AUTHOR_SEPARATOR.join(last_names)


def truncate_title(title: str, width: int = TITLE_WIDTH) -> str:
    """Cut a title to `width` characters, marking the cut with "..."."""
    if len(title) <= width:
        return title
    return title[:width] + "..."
