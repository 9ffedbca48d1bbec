"""Route path helpers.

Routes are registered with ``:name`` parameters; OpenAPI wants ``{name}``.
"""

import re

from routedoc.errors import PathMergeAmbiguity

_COLON_PARAM = re.compile(r":([^/]+)")


def normalize_for_document(path: str) -> str:
    """Rewrite ``:name`` segments to ``{name}``. Existing braces are left alone."""
    return _COLON_PARAM.sub(r"{\1}", path)


def split_segments(path: str) -> list[str]:
    return [segment.strip() for segment in path.split("/") if segment.strip()]


def merge_mount_path(*parts: str, strict: bool = False) -> str:
    """Join path fragments with single slashes and one leading slash.

    Empty, leading, trailing and duplicate slashes are discarded, so
    ``merge_mount_path("/api/", "/tasks")`` and ``merge_mount_path("api", "tasks")``
    both give ``/api/tasks``. Fragments without any segment give ``/``, or
    raise ``PathMergeAmbiguity`` when ``strict`` is set.
    """
    segments = [segment for part in parts for segment in split_segments(part)]
    if not segments and strict:
        raise PathMergeAmbiguity(f"no path segments in {parts!r}")
    return "/" + "/".join(segments)
