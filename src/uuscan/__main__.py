"""Run the calculator CLI: python -m uuscan."""

from uuscan.cli import main

raise SystemExit(main())
