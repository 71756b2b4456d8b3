"""Entry point for ``python -m gluon_autobuild``."""

from gluon_autobuild.cli import run

if __name__ == "__main__":
    run()
