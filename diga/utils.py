"""Hilfsfunktionen für IK-Nummern und Freischaltcodes."""

from __future__ import annotations

from typing import Optional

IK_PREFIX = "IK"
TEST_CODE_PREFIX = "77"


def ik_number_without_prefix(ik_number: Optional[str]) -> Optional[str]:
    """Liefert die rein numerische Form einer IK-Nummer (``IK123`` -> ``123``).

    ``None`` wird durchgereicht; der Serializer meldet das fehlende Pflichtfeld.
    """

    if ik_number is None:
        return None
    ik = ik_number.strip()
    if ik.startswith(IK_PREFIX):
        return ik[len(IK_PREFIX):]
    return ik


def ik_number_with_prefix(ik_number: Optional[str]) -> Optional[str]:
    """Liefert die IK-Nummer mit Präfix (``123`` -> ``IK123``)."""

    bare = ik_number_without_prefix(ik_number)
    if bare is None:
        return None
    return IK_PREFIX + bare


def is_diga_test_code(code: Optional[str]) -> bool:
    # GKV test codes for DiGA manufacturers all start with "77"
    return code is not None and code.startswith(TEST_CODE_PREFIX)
