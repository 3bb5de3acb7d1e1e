"""Normalization of tar member names into snapshot keys."""

SEPARATOR = "/"


def normalize_entry_path(name: str, is_dir: bool = False) -> str:
    """Turn a tar member name into an absolute snapshot key.

    A leading ``./`` marker is dropped down to its separator, and a bare
    relative name gets a separator prepended, so ``./a/b.txt`` and
    ``a/b.txt`` both map to ``/a/b.txt``. Names that merely start with a
    dot (``.well-known/x``) keep it.

    Args:
        name: Member name as stored in the archive
        is_dir: Whether the member is a directory

    Returns:
        The normalized key; directory keys always end with a separator
    """
    if name == ".":
        name = SEPARATOR
    elif name.startswith("./"):
        name = name[1:]
    elif not name.startswith(SEPARATOR):
        name = SEPARATOR + name

    if is_dir:
        if not name.endswith(SEPARATOR):
            name += SEPARATOR
    else:
        name = name.rstrip(SEPARATOR) or SEPARATOR
    return name
