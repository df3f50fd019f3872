from __future__ import annotations

from enum import Enum


class TypeRegle(str, Enum):
    """Enum centralisant les types de règles connus.

    Hérite de `str` pour une sérialisation JSON directe (valeur = nom stable).
    """

    # Binaires (paire d'élèves)
    DISTANCE_MIN = "MinDistance"
    DISTANCE_MAX = "MaxDistance"
    PAS_ADJACENTS = "NotAdjacent"

    # Unaires (élève)
    PREFERE_DEVANT = "PreferFront"
    LOIN_DU_BUREAU = "PreferAwayFromTeacher"
    DANS_RANGEES = "MustBeInRows"
    SUR_SIEGES = "MustBeInSeats"

    # Globales (groupe d'élèves)
    SEPARATION_ETIQUETTE = "TagSeparation"

    # Type non reconnu : conservé tel quel, pénalité nulle
    INCONNUE = "_unknown_"
