from __future__ import annotations

from dataclasses import dataclass

from ..erreurs import ErreurEntree


@dataclass(frozen=True)
class Position:
    """Représente une *case* de la grille de la salle.

    Attributs
    ---------
    r : int
    Indice de rangée, du bureau vers le fond (0-indexé, 0 = premier rang).
    c : int
    Indice de colonne, de gauche à droite (0-indexé).


    Cette classe est immuable pour garantir la stabilité des clés
    dans les dictionnaires/ensembles pendant la recherche.
    """

    r: int
    c: int

    def cle(self) -> str:
        """Clé texte « r,c » utilisée par le document JSON."""
        return f"{self.r},{self.c}"

    @classmethod
    def depuis_cle(cls, cle: str) -> "Position":
        """Reconstruit une position depuis une clé « r,c »."""
        try:
            r_str, c_str = str(cle).split(",")
            return cls(r=int(r_str), c=int(c_str))
        except ValueError as exc:
            raise ErreurEntree(f"Clé de case invalide: {cle!r}") from exc
