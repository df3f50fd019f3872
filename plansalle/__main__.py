# plansalle/__main__.py
from __future__ import annotations

import argparse
import sys


def _run_exemple(graine: int) -> int:
    # importe tardivement pour ne rien charger quand on affiche juste l’aide
    try:
        from .exemples import construire_exemple
    except ImportError as e:
        print("Impossible d’importer plansalle.exemples :", e, file=sys.stderr)
        return 1
    construire_exemple(graine)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="plansalle",
        description="Exemple de plan de salle résolu par recuit simulé."
    )
    sub = parser.add_subparsers(dest="cmd")

    p_ex = sub.add_parser("exemple", help="Résout la salle de démonstration.")
    p_ex.add_argument("--graine", type=int, default=12345, help="graine du générateur (défaut 12345)")

    # défaut: si aucune sous-commande n’est fournie, on lance l’exemple
    args = parser.parse_args(argv)
    if not args.cmd:
        return _run_exemple(12345)
    return _run_exemple(args.graine)


if __name__ == "__main__":
    raise SystemExit(main())
