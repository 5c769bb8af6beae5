"""Root conftest: pin settings that tests rely on."""

import os

os.environ.setdefault("ENRICHER_ALLOWED_STATUSES", "for_sale,pending,sold")
os.environ.setdefault("ENRICHER_OUTPUT_INDENT", "2")
