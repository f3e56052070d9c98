#!/usr/bin/env python3
"""Vacía los archivos JSON del servidor (usuarios y/o notas).

Dry-run por defecto: muestra cuántos registros se borrarían. Confirma con --yes.

Uso:
  PYTHONPATH=. python3 scripts/reset_store.py --notes --yes
  PYTHONPATH=. python3 scripts/reset_store.py --users --notes --yes
"""
from __future__ import annotations

import argparse

from wellwork.infrastructure.db.json_store import notes_store, users_store


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--users", action="store_true", help="Vaciar usuarios")
    ap.add_argument("--notes", action="store_true", help="Vaciar notas")
    ap.add_argument("--yes", action="store_true", help="Aplicar (sin esto es dry-run)")
    args = ap.parse_args()

    targets = []
    if args.users:
        targets.append(("usuarios", users_store()))
    if args.notes:
        targets.append(("notas", notes_store()))
    if not targets:
        ap.error("indica --users y/o --notes")

    for label, store in targets:
        count = len(store.read())
        if not args.yes:
            print(f"[dry-run] Se borrarían {count} {label} de {store.path}")
            continue
        store.write([])
        print(f"{label}: {count} registros borrados ({store.path})")


if __name__ == "__main__":
    main()
