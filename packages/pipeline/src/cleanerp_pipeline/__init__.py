"""
cleanerp_pipeline — command-line tools for CleanERP bulk data work.

Architecture:
  loaders/  — CSV site importer with batched, retried Supabase inserts
  utils/    — tenacity retry helpers
  cli.py    — the `cleanerp` click group (import-sites, convert, breakdown)

CLI:
    cleanerp import-sites sites.csv --client-id <uuid> --dry-run
    cleanerp convert 500 weekly monthly
    cleanerp breakdown 2165 monthly
"""

__version__ = "0.1.0"
