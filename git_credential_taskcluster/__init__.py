"""git-credential-taskcluster: a git credential helper backed by Taskcluster secrets."""

__version__ = "0.1.0"
