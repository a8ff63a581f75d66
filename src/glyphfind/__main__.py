"""Allow ``python -m glyphfind``."""

from glyphfind._cli import main

main()
