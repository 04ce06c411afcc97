"""Site search service API using FastAPI.

This module implements a FastAPI-based web service that runs the searches of
the configured search pages against Solr.

The service provides endpoints for:
- Search results as an OPDS catalog with facet navigation
- Search results as a plain JSON document
- Health check monitoring
"""
import logging
import sys

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from sitesearch.config import DB_PATH, FILTER_PARAM
from sitesearch.solr import SOLR_SERVICE
from sitesearch.query.factory import SearchPageFactory
from sitesearch.query.types import RequestParameters

app = FastAPI()

# Initialize factory
factory = SearchPageFactory(
    db_path=DB_PATH,
    service=SOLR_SERVICE
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin"],
)


def _request_parameters(request: Request) -> RequestParameters:
    """Read search parameters from the query string, keeping their order."""
    return RequestParameters.from_query_items(
        request.query_params.multi_items(), FILTER_PARAM)


@app.get("/search/{page_key}")
async def search_catalog(request: Request, page_key: str):
    """Search a page and return the results as an OPDS catalog.

    Query parameters:
        Search: Free-text term.
        SortBy, SortDir: Sort field and "Ascending" / "Descending".
        SearchType: Content type to restrict the search to.
        start, limit: Pagination.
        filter[Field][]: Facet value to filter on, repeatable.

    Returns:
        JSONResponse with the catalog, media type "application/opds+json".
    """
    try:
        catalog = factory.build_catalog(page_key, _request_parameters(request))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return JSONResponse(
        content=catalog.model_dump(mode='json'),
        status_code=200,
        media_type="application/opds+json"
    )


@app.get("/search/{page_key}/results")
async def search_results(request: Request, page_key: str):
    """Search a page and return records, facets and crumbs as JSON.

    Accepts the same query parameters as the catalog endpoint.
    """
    try:
        results = factory.build_results(page_key, _request_parameters(request))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return JSONResponse(content=results.model_dump(mode='json'), status_code=200)


@app.get('/healthcheck')
async def health_check():
    """Health check endpoint for service monitoring.

    Reports whether the search backend is reachable. The service itself
    stays healthy when it is not, as searches then return no results.
    """
    health_status = {
        'status': 'healthy',
        'message': 'Service is running',
        'search_backend': 'connected' if SOLR_SERVICE.is_connected() else 'unavailable',
    }
    return JSONResponse(content=health_status, status_code=200)


if __name__ == "__main__":
    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s %(levelname)s %(name)s %(threadName)s :%(message)s',
        handlers=[
            logging.StreamHandler(
                sys.stdout)])

    # Run the application
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=5000,
        log_level="debug"
    )
