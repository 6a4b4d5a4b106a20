"""
cleanerp_shared — shared utilities, models, and configuration for CleanERP.

Usage:
    from cleanerp_shared.config import settings
    from cleanerp_shared.db import get_supabase_client
    from cleanerp_shared.models.sites import Site, SiteCreate
    from cleanerp_shared.mappers import map_to_db, map_from_db
    from cleanerp_shared.billing import convert_billing_amount
"""

__version__ = "0.1.0"
