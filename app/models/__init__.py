"""Database models — re-exports all models.

Import from here:  from app.models import Account, CatalogEntry, ...
Or from submodules: from app.models.quotes import QuoteRequest
"""

from .base import Base  # noqa: F401

# Identity
from .accounts import Account  # noqa: F401

# Catalog: master templates & seller listings
from .catalog import CatalogEntry  # noqa: F401

# Quotes: RFQs, matched sellers, offers
from .quotes import QuoteMatchedSeller, QuoteOffer, QuoteRequest  # noqa: F401
