"""Turn machine decimals into kitchen fractions.

Structured recipe data is often generated from scaled or converted
quantities, so ingredient lines arrive as ``"0.333 cup butter"`` or
``"1.5 cups milk"``.  These helpers rewrite them the way a cook would
write them:

    "0.333 cup butter"  ->  "1/3 cup butter"
    "1.5 cups milk"     ->  "1 1/2 cups milk"
    "2.0 tsp salt"      ->  "2 tsp salt"
"""

from __future__ import annotations

import math
import re
from typing import Iterable, List

from clipper.heuristics import DEFAULT_RULES, Heuristics

_DECIMAL_RE = re.compile(r"(?<![\d.])(\d+\.\d+)(?![\d.])")
_WHITESPACE_RE = re.compile(r"\s+")


def to_kitchen_fraction(value: float, *, rules: Heuristics = DEFAULT_RULES) -> str:
    """Render a non-negative *value* as a whole number, fraction or mixed fraction.

    Thirds are recognised first (within ``rules.third_tolerance``), anything
    else snaps to the nearest ``1/rules.fraction_denominator``.
    """
    whole = math.floor(value)
    frac = value - whole

    for num in (1, 2):
        if abs(frac - num / 3) <= rules.third_tolerance:
            return f"{num}/3" if whole == 0 else f"{whole} {num}/3"

    den = rules.fraction_denominator
    num = math.floor(frac * den + 0.5)
    if num == den:
        whole, num = whole + 1, 0
    if num == 0:
        return str(whole)

    g = math.gcd(num, den)
    num, den = num // g, den // g
    if whole == 0:
        return f"{num}/{den}"
    return f"{whole} {num}/{den}"


def humanize(line: str, *, rules: Heuristics = DEFAULT_RULES) -> str:
    """Rewrite decimal quantities in *line* as kitchen fractions.

    The leading quantity is always rewritten when it is a decimal.  Decimals
    further into the line are only touched when they carry at least
    ``rules.min_inline_decimals`` decimal digits (``0.333``, not ``2.5``),
    since short decimals mid-line are usually sizes or temperatures.
    """

    def _replace(match: re.Match[str]) -> str:
        token = match.group(1)
        leading = not line[: match.start()].strip()
        decimals = len(token.split(".", 1)[1])
        if not leading and decimals < rules.min_inline_decimals:
            return token

        value = float(token)
        pretty = to_kitchen_fraction(value, rules=rules)
        if pretty == "0" and value > 0:
            # Too small for the fraction grid; better untouched than "0".
            return token
        return pretty

    return _DECIMAL_RE.sub(_replace, line)


def humanize_lines(lines: Iterable[str], *, rules: Heuristics = DEFAULT_RULES) -> List[str]:
    """Humanize every line, normalise whitespace and drop blanks."""
    out: List[str] = []
    for line in lines:
        cleaned = _WHITESPACE_RE.sub(" ", humanize(str(line), rules=rules)).strip()
        if cleaned:
            out.append(cleaned)
    return out
