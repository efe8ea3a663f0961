"""Candidate action names for a path, most specific first."""

from collections.abc import Callable, Iterator


def split_path(path: str) -> list[str]:
    """Split *path* on ``/`` and drop empty segments."""
    return [atom for atom in path.split("/") if atom]


def patterns_for(path: str) -> Iterator[tuple[str, tuple[str, ...]]]:
    """Yield ``(action_name, params)`` pairs in order of significance.

    Leading segments join with ``__`` into the action name and the rest
    become positional parameters. The last candidate is always ``index``
    with every segment as a parameter::

        list(patterns_for("/foo/bar"))
        # [("foo__bar", ()), ("foo", ("bar",)), ("index", ("foo", "bar"))]

        list(patterns_for("/"))
        # [("index", ())]
    """
    atoms = split_path(path)
    for length in range(len(atoms), -1, -1):
        name = "__".join(atoms[:length]) or "index"
        yield name, tuple(atoms[length:])


def first_pattern[T](
    path: str,
    consumer: Callable[[str, tuple[str, ...]], T | None],
) -> T | None:
    """Return the first non-``None`` result of *consumer* over the candidates."""
    for name, params in patterns_for(path):
        result = consumer(name, params)
        if result is not None:
            return result
    return None
