from __future__ import annotations

"""
Normalize key identifiers reported by different browsers and toolkits.
"""

ENTER = "Enter"

_KEY_ALIASES = {
    "Left": "ArrowLeft",
    "Right": "ArrowRight",
    "Up": "ArrowUp",
    "Down": "ArrowDown",
    "Spacebar": " ",
    "Del": "Delete",
    "Esc": "Escape",
    # Desktop toolkits and numeric keypads report Enter under other names.
    "Return": ENTER,
    "KP_Enter": ENTER,
    "NumpadEnter": ENTER,
}


def normalize_key_name(key: str) -> str:
    return _KEY_ALIASES.get(key, key)
