"""Colour literal recognition: hex, rgb()/rgba(), hsl()/hsla(), CSS named colours."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_NUM = r"\s*-?\d{1,3}(?:\.\d+)?%?\s*"
_ALPHA = r"\s*(?:0|1|0?\.\d+|\d{1,3}%)\s*"
_RGB_RE = re.compile(rf"^rgba?\({_NUM},{_NUM},{_NUM}(?:,{_ALPHA})?\)$", re.IGNORECASE)
_HSL_RE = re.compile(
    rf"^hsla?\(\s*-?\d{{1,3}}(?:\.\d+)?(?:deg)?\s*,{_NUM},{_NUM}(?:,{_ALPHA})?\)$",
    re.IGNORECASE,
)

CSS_NAMED_COLORS: frozenset[str] = frozenset(
    """
    aliceblue antiquewhite aqua aquamarine azure beige bisque black blanchedalmond
    blue blueviolet brown burlywood cadetblue chartreuse chocolate coral
    cornflowerblue cornsilk crimson cyan darkblue darkcyan darkgoldenrod darkgray
    darkgreen darkgrey darkkhaki darkmagenta darkolivegreen darkorange darkorchid
    darkred darksalmon darkseagreen darkslateblue darkslategray darkslategrey
    darkturquoise darkviolet deeppink deepskyblue dimgray dimgrey dodgerblue
    firebrick floralwhite forestgreen fuchsia gainsboro ghostwhite gold goldenrod
    gray green greenyellow grey honeydew hotpink indianred indigo ivory khaki
    lavender lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
    lightgoldenrodyellow lightgray lightgreen lightgrey lightpink lightsalmon
    lightseagreen lightskyblue lightslategray lightslategrey lightsteelblue
    lightyellow lime limegreen linen magenta maroon mediumaquamarine mediumblue
    mediumorchid mediumpurple mediumseagreen mediumslateblue mediumspringgreen
    mediumturquoise mediumvioletred midnightblue mintcream mistyrose moccasin
    navajowhite navy oldlace olive olivedrab orange orangered orchid palegoldenrod
    palegreen paleturquoise palevioletred papayawhip peachpuff peru pink plum
    powderblue purple rebeccapurple red rosybrown royalblue saddlebrown salmon
    sandybrown seagreen seashell sienna silver skyblue slateblue slategray
    slategrey snow springgreen steelblue tan teal thistle tomato turquoise violet
    wheat white whitesmoke yellow yellowgreen
    """.split()
)


@dataclass(frozen=True)
class ColorValue:
    """A recognised colour literal.

    Attributes:
        format: One of ``hex``, ``rgb``, ``hsl``, ``named``.
        value: The literal, trimmed; hex and named values lowercased, functional
            notations with whitespace removed.
    """

    format: str
    value: str


def is_color_literal(text: str) -> ColorValue | None:
    """Return a ColorValue if the whole (trimmed) *text* is a colour literal."""
    candidate = text.strip()
    if not candidate:
        return None
    if _HEX_RE.match(candidate):
        return ColorValue("hex", candidate.lower())
    if _RGB_RE.match(candidate):
        return ColorValue("rgb", re.sub(r"\s+", "", candidate.lower()))
    if _HSL_RE.match(candidate):
        return ColorValue("hsl", re.sub(r"\s+", "", candidate.lower()))
    if candidate.lower() in CSS_NAMED_COLORS:
        return ColorValue("named", candidate.lower())
    return None
