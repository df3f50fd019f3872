from __future__ import annotations

import re
from typing import Final, Optional

from ..erreurs import ErreurEntree
from .position import Position

# « S » + rangée sur deux chiffres + « _ » + colonne sur deux chiffres
_MOTIF_SIEGE: Final = re.compile(r"^S(\d{2})_(\d{2})$")

INDICE_MAX: Final[int] = 99


def identifiant_siege(r: int, c: int) -> str:
    """Identifiant stable d'un siège, dérivé de sa case (ex. (3, 12) -> « S03_12 »).

    Les indices au-delà de 99 sortent de l'encodage à deux chiffres.
    """
    if not (0 <= r <= INDICE_MAX and 0 <= c <= INDICE_MAX):
        raise ErreurEntree(f"Case ({r},{c}) hors de l'encodage des sièges (0..{INDICE_MAX})")
    return f"S{r:02d}_{c:02d}"


def position_siege(identifiant: str) -> Optional[Position]:
    """Retrouve la case d'un identifiant de siège, ou `None` s'il ne suit pas le motif."""
    m = _MOTIF_SIEGE.fullmatch(str(identifiant))
    if m is None:
        return None
    return Position(r=int(m.group(1)), c=int(m.group(2)))
