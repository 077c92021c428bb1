"""Module entrypoint for ``python -m jsonv8n``."""

from __future__ import annotations

from jsonv8n.cli import cli_entrypoint

if __name__ == "__main__":
    cli_entrypoint()
