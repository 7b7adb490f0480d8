"""Punto de entrada: ``python -m salud_dashboard``."""

from __future__ import annotations

from salud_dashboard.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
