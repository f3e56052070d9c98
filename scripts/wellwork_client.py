#!/usr/bin/env python3
"""CLI del cliente WellWork (offline-first).

Usa el almacenamiento local (`CLIENT_STORAGE_DIR`, por defecto ~/.wellwork) y la
API en `WELLWORK_API_URL`. Si el backend no responde, las ediciones quedan en la
cola y se sincronizan con `sync` o mientras corre `run`.

Uso:
  PYTHONPATH=. python3 scripts/wellwork_client.py register ana secreto1
  PYTHONPATH=. python3 scripts/wellwork_client.py login ana secreto1
  PYTHONPATH=. python3 scripts/wellwork_client.py save 2024-06-01 "comprar leche"
  PYTHONPATH=. python3 scripts/wellwork_client.py notes
  PYTHONPATH=. python3 scripts/wellwork_client.py sync
  PYTHONPATH=. python3 scripts/wellwork_client.py run
"""
from __future__ import annotations

import argparse
import json
import sys

from wellwork.client.app import WellWorkClient
from wellwork.client.http import ApiError, TransportError
from wellwork.client.notes import NotAuthenticatedError
from wellwork.core.logging import setup_logging


def _print_notes(notes) -> None:
    if not notes:
        print("Sin notas.")
        return
    for n in sorted(notes, key=lambda n: n.get("date") or ""):
        print(f"{n.get('date')}  [{n.get('id')}]  {n.get('content')}")


def main() -> int:
    ap = argparse.ArgumentParser(description="Cliente WellWork")
    ap.add_argument("--api-url", default=None, help="URL base de la API (por defecto WELLWORK_API_URL)")
    ap.add_argument("--storage-dir", default=None, help="Directorio de almacenamiento local")
    ap.add_argument("--log-level", default="WARNING")
    sub = ap.add_subparsers(dest="cmd", required=True)

    for name in ("register", "login"):
        p = sub.add_parser(name)
        p.add_argument("username")
        p.add_argument("password")
    sub.add_parser("logout")
    sub.add_parser("status")
    sub.add_parser("notes")
    p = sub.add_parser("save")
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("content")
    p = sub.add_parser("delete")
    p.add_argument("note_id")
    sub.add_parser("sync")
    p = sub.add_parser("ask")
    p.add_argument("message")
    p = sub.add_parser("calendar")
    p.add_argument("--year", type=int, default=None)
    p.add_argument("--month", type=int, default=None)
    sub.add_parser("run", help="Mantiene el monitor, la sincronización y las notificaciones activos")
    args = ap.parse_args()

    setup_logging(args.log_level)
    client = WellWorkClient(args.api_url, args.storage_dir, on_notification=lambda n: print(n.message))
    try:
        if args.cmd == "register":
            print(client.register(args.username, args.password))
        elif args.cmd == "login":
            user = client.login(args.username, args.password)
            print(f"Sesión iniciada como {user.get('username')}")
        elif args.cmd == "logout":
            client.logout()
            print("Sesión cerrada.")
        elif args.cmd == "status":
            client.monitor.check_now()
            print(json.dumps(client.status(), ensure_ascii=False, indent=2))
        elif args.cmd == "notes":
            client.monitor.check_now()
            _print_notes(client.notes.load_notes())
        elif args.cmd == "save":
            client.monitor.check_now()
            client.notes.save(args.date, args.content)
            print(f"Guardado. Pendientes de sincronizar: {len(client.queue)}")
        elif args.cmd == "delete":
            client.monitor.check_now()
            client.notes.delete(args.note_id)
            print(f"Eliminado. Pendientes de sincronizar: {len(client.queue)}")
        elif args.cmd == "sync":
            report = client.sync_now()
            print(report.model_dump_json(indent=2))
        elif args.cmd == "ask":
            print(client.ask(args.message))
        elif args.cmd == "calendar":
            print(client.calendar(args.year, args.month))
        elif args.cmd == "run":
            try:
                client.run_forever()
            except KeyboardInterrupt:
                pass
    except (ValueError, LookupError, NotAuthenticatedError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ApiError as e:
        print(f"Error del servidor: {e.message or e.status_code}", file=sys.stderr)
        return 1
    except TransportError as e:
        print(f"Backend no disponible: {e}", file=sys.stderr)
        return 2
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
