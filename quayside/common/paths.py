"""Repository path utilities.

Registries address repositories as slash-delimited paths: ``busybox`` lives
in the registry's global namespace, ``team/busybox`` in the ``team``
namespace. Only the first ``/`` separates the namespace; anything after it
belongs to the repository name.
"""

from __future__ import annotations


def split_repository_path(path: str) -> tuple[str | None, str]:
    """Split a repository path into namespace and repository name.

    Parameters
    ----------
    path:
        Repository path as reported by the registry.

    Returns
    -------
    tuple[str | None, str]
        ``(namespace, name)``; ``namespace`` is ``None`` for paths without a
        namespace prefix.

    Raises
    ------
    ValueError
        If either component is empty.

    Examples
    --------
    >>> split_repository_path("busybox")
    (None, 'busybox')
    >>> split_repository_path("team/tools/busybox")
    ('team', 'tools/busybox')

    """
    if "/" not in path:
        if not path:
            msg = "Invalid repository path: empty"
            raise ValueError(msg)
        return None, path

    namespace, name = path.split("/", 1)
    if not namespace or not name:
        msg = f"Invalid repository path: {path!r}"
        raise ValueError(msg)
    return namespace, name


def qualified_repository_name(namespace: str | None, name: str) -> str:
    """Join a namespace and repository name into a registry path.

    >>> qualified_repository_name(None, "busybox")
    'busybox'
    >>> qualified_repository_name("team", "busybox")
    'team/busybox'

    """
    return name if namespace is None else f"{namespace}/{name}"
