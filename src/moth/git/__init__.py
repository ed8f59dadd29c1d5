"""Git integration: commit tagging hook, commit prefix parsing, history report."""
