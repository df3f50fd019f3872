from __future__ import annotations

from typing import List, MutableSequence, TypeVar

T = TypeVar("T")

_MASQUE: int = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """Multiplication entière 32 bits (octets de poids faible uniquement)."""
    return (a * b) & _MASQUE


class Mulberry32:
    """Générateur pseudo-aléatoire 32 bits (construction *mulberry32*).

    Même graine => même suite de flottants, quelle que soit la plateforme.
    Le constructeur, la réparation et le solveur en dépendent tous pour être
    rejouables à l'identique.

    Paramètres
    ----------
    graine : int
        Entier quelconque, ramené sur 32 bits non signés.
    """

    def __init__(self, graine: int) -> None:
        self._etat: int = int(graine) & _MASQUE

    def suivant(self) -> float:
        """Retourne le prochain flottant de [0, 1)."""
        self._etat = (self._etat + 0x6D2B79F5) & _MASQUE
        t: int = self._etat
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASQUE)) & _MASQUE
        return ((t ^ (t >> 14)) & _MASQUE) / 4294967296

    def __call__(self) -> float:
        return self.suivant()

    def indice(self, n: int) -> int:
        """Indice uniforme dans [0, n)."""
        return int(self.suivant() * n)

    def melanger(self, elements: MutableSequence[T]) -> MutableSequence[T]:
        """Mélange de Fisher–Yates *en place* (parcours depuis la fin)."""
        i: int
        for i in range(len(elements) - 1, 0, -1):
            j: int = int(self.suivant() * (i + 1))
            elements[i], elements[j] = elements[j], elements[i]
        return elements

    def echantillon(self, n: int) -> List[float]:
        """Tire `n` flottants successifs (pratique pour les tests de reproductibilité)."""
        return [self.suivant() for _ in range(n)]
