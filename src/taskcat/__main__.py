"""Entry point for running taskcat as a module."""

# repl() in repl.py is the error boundary for the interactive loop, and
# main() in cli.py handles startup errors (profile, data file).

from taskcat.cli import main

if __name__ == "__main__":
    main()
