# src/planit/__main__.py

from planit.cli.main import main

main()
