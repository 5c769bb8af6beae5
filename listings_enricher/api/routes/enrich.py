"""Enrichment endpoints."""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from listings_enricher.demo import DEMO_CLIMATE_CSV, DEMO_LISTINGS_TSV
from listings_enricher.etl import EnrichmentPipeline
from listings_enricher.export import listings_to_dicts

router = APIRouter()


class EnrichRequest(BaseModel):
    """Request model for an enrichment run."""
    listings_text: str
    climate_text: str = ""


@router.post("")
async def enrich(request: EnrichRequest):
    """Join pasted listings and climate tables.

    Returns the enriched listings sorted by price, plus a run summary.
    A structurally invalid row or unparsable text fails the whole request
    with a single message.
    """
    result = EnrichmentPipeline().run(request.listings_text, request.climate_text)
    if not result.success:
        raise HTTPException(status_code=422, detail=result.error_message)

    return {
        "count": len(result.listings),
        "listings": listings_to_dicts(result.listings),
        "summary": result.to_dict(),
    }


@router.get("/demo")
async def demo():
    """Demo listings and climate text for the enrich endpoint."""
    return {
        "listings_text": DEMO_LISTINGS_TSV,
        "climate_text": DEMO_CLIMATE_CSV,
    }
