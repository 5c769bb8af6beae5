"""FastAPI application for the Listings Enricher."""
from fastapi import FastAPI

from listings_enricher.api.routes import enrich

app = FastAPI(
    title="Listings Enricher",
    description="Join real-estate listings with parcel climate data",
    version="0.1.0"
)

# API Routes
app.include_router(enrich.router, prefix="/api/enrich", tags=["enrich"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
