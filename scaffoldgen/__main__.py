# File: scaffoldgen/__main__.py
"""
scaffoldgen — Module entry point.

Allows running the generator directly via::

    python -m scaffoldgen --entity Product --columns id,name,cover_img

This module simply delegates to the CLI entry point defined in
``scaffoldgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from scaffoldgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
