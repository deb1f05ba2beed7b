"""
Env Auditor: a static auditor for environment variables.

Scans source code in several languages for environment variable reads, parses
.env files for definitions, and cross-references the two to report missing
variables, unused variables and inconsistent naming. It reads files only and
reports findings as JSON or Markdown.
"""

__version__ = "0.1.0"
