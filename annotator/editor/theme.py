from __future__ import annotations

from typing import Any, Iterable, Mapping

_SUPPORTED_THEME_PROPERTIES = {
    "accentColor": "color",
    "appBackgroundColor": "backgroundColor",
    "ctaBackgroundColor": "backgroundColor",
    "ctaTextColor": "color",
    "selectionFontFamily": "fontFamily",
    "annotationFontFamily": "fontFamily",
}


def apply_theme(properties: Iterable[str], settings: Mapping[str, Any]) -> dict[str, str]:
    """Map branding settings for ``properties`` to style attribute values.

    Properties that are unsupported or have no branding value are skipped.
    """
    style: dict[str, str] = {}
    branding = (settings or {}).get("branding")
    if not branding:
        return style
    for prop in properties:
        attribute = _SUPPORTED_THEME_PROPERTIES.get(prop)
        value = branding.get(prop)
        if attribute and value:
            style[attribute] = str(value)
    return style
