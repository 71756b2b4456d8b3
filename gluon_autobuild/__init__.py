"""Gluon Autobuild - release orchestration for Gluon firmware site trees.

This package wraps a site's ``build.sh`` script: it derives the release
identifier for a branch class and drives every site through the dirclean,
update, clean, build, sign and deploy phases.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
