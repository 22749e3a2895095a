"""Module entrypoint so ``python -m flowtrace`` runs the CLI."""

from flowtrace.cli import main

if __name__ == "__main__":
    main()
