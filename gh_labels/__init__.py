"""
gh-labels: manage GitHub repository labels through the gh CLI.

Lists, creates, updates and deletes labels of one repository, and applies
declarative label sets (TOML files or named templates) with dry-run previews
and an explicit policy for labels that already exist.

Environment:
    GH_LABELS_GH            - gh executable to run (default: gh)
    GH_LABELS_TEMPLATE_DIR  - user-scope template directory
"""

from gh_labels.cli import main

__version__ = "0.1.0"
__all__ = ["main", "__version__"]
