"""
PDF navigator core package.

The library subpackage loads PDFs from disk or URLs, rebuilds a markdown
body from per-page text and the bookmark outline, and answers section
lookups (paginated) and full-text searches attributed to sections. Loaded
sources are remembered in a small registry and replayed on startup.
"""
