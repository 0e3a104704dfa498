"""
main.py

FastAPI application exposing the remedy search endpoints.
The vocabulary is loaded once at startup; the plant catalog is read fresh
for every request (a catalog snapshot per search).
"""

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional
import logging
import os

from remedy.matching.datastore import CatalogError, PlantCatalog
from remedy.matching.matcher import Matcher
from remedy.matching.vocabulary import DEFAULT_VOCABULARY, load_vocabulary

logger = logging.getLogger(__name__)

# --------
# Config
# --------
DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
CATALOG_PATH = os.environ.get("REMEDY_CATALOG_PATH", os.path.join(DATA_DIR, "plants.json"))
VOCABULARY_PATH = os.environ.get("REMEDY_VOCABULARY_PATH")

# --------
# FastAPI app
# --------
app = FastAPI(title="Herbal Remedy Search API")

# Allow CORS from local dev (adjust origins for prod)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------
# Request model
# --------
class SearchRequest(BaseModel):
    q: Optional[str] = None


# --------
# Startup: load vocabulary and instantiate matcher
# --------
if VOCABULARY_PATH:
    try:
        VOCABULARY = load_vocabulary(VOCABULARY_PATH)
        logger.info(f"Loaded vocabulary {VOCABULARY.version} from {VOCABULARY_PATH}")
    except Exception as e:
        # fail-fast if the vocabulary file is unreadable
        raise RuntimeError(f"Failed to load vocabulary: {e}") from e
else:
    VOCABULARY = DEFAULT_VOCABULARY

MATCHER = Matcher(VOCABULARY)


def get_catalog() -> PlantCatalog:
    """Read the current catalog snapshot. A missing file is an empty catalog."""
    catalog = PlantCatalog()
    if not os.path.exists(CATALOG_PATH):
        logger.warning(f"Catalog not found at {CATALOG_PATH}")
        return catalog
    try:
        catalog.load(CATALOG_PATH)
    except (CatalogError, OSError):
        logger.exception("Database error while loading catalog")
        raise HTTPException(status_code=500, detail="Failed to fetch plants data")
    return catalog


def _require_query(q: Optional[str]) -> str:
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail='Query parameter "q" is required')
    return q


def _run_search(q: str, catalog: PlantCatalog) -> dict:
    logger.info(f"Processing query: {q}")
    response = MATCHER.search(q, catalog)
    logger.info(f"Extracted keywords: {', '.join(response.context.keywords)}")
    logger.info(f"Returning {len(response.results)} matches")
    return response.to_dict()


# --------
# Endpoints
# --------
@app.get("/api/health")
async def health(catalog: PlantCatalog = Depends(get_catalog)):
    return {
        "status": "ok",
        "plants_loaded": catalog.size(),
        "plants_with_benefits": catalog.count_with_benefits(),
        "vocabulary_version": VOCABULARY.version,
    }


@app.get("/api/search")
async def search_get(q: Optional[str] = None, catalog: PlantCatalog = Depends(get_catalog)):
    return _run_search(_require_query(q), catalog)


@app.post("/api/search")
async def search_post(req: SearchRequest, catalog: PlantCatalog = Depends(get_catalog)):
    return _run_search(_require_query(req.q), catalog)


@app.post("/api/insights")
async def insights(req: SearchRequest):
    q = _require_query(req.q)
    return MATCHER.analyze(q).to_insights()
