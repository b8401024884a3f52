# app/core/labels.py
from typing import Any, List


def normalize_labels(value: Any) -> List[str]:
    """Return a place's labels as a list.

    Stored records carry ``place_label`` either as a native list or as a
    comma-joined string such as ``"Beach, Eco Tourism"``.

    - ``None`` -> ``[]``
    - ``str``  -> split on ``,`` with each part trimmed
    - ``list`` / ``tuple`` -> returned unchanged as a list

    Blank entries are kept; ``PlaceForm`` rejects them at submission.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",")]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise TypeError(f"Unsupported label value: {type(value).__name__}")
