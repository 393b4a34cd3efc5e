"""Services behind the git-wt commands."""
