from __future__ import annotations

from enum import Enum


class CategorieErreur(str, Enum):
    """Catégories d'échec remontées à l'appelant (valeur = nom stable JSON)."""

    ENTREE = "input"
    CAPACITE = "capacity"
    PLACEMENT_FIXE = "fixed_placement"


class ErreurPlacement(ValueError):
    """Échec de validation d'une opération du planificateur.

    Jamais rattrapée ni réessayée dans le cœur : c'est à l'appelant de décider
    du repli (ex. affectation vide après une réparation impossible).
    """

    categorie: CategorieErreur = CategorieErreur.ENTREE

    def vers_dict(self) -> dict[str, str]:
        """Représentation JSON-friendly : {"error": ..., "category": ...}."""
        return {"error": str(self), "category": self.categorie.value}


class ErreurEntree(ErreurPlacement):
    """Entrée invalide : aucun élève, aucun siège, document mal formé."""

    categorie = CategorieErreur.ENTREE


class ErreurCapacite(ErreurPlacement):
    """Pas assez de sièges libres pour les élèves à placer."""

    categorie = CategorieErreur.CAPACITE


class ErreurPlacementFixe(ErreurPlacement):
    """Placement imposé incohérent (siège inconnu, case non-siège, doublon)."""

    categorie = CategorieErreur.PLACEMENT_FIXE
