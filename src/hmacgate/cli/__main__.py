"""CLI entry point for hmacgate.cli module.

Enables execution via: python -m hmacgate.cli
"""

from hmacgate.cli.envelope import main

if __name__ == "__main__":
    raise SystemExit(main())
