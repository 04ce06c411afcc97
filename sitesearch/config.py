"""
This file contains all Global variables
"""
import os

DB_PATH = os.environ.get("SEARCH_DB_PATH", "database/db.json")

SOLR_URL = os.environ.get("SOLR_URL", "http://localhost:8983/solr/sitesearch")
SOLR_TIMEOUT = 10  # seconds

CATALOG_LINK = "/search/{page_key}"
RESULTS_LINK = "/search/{page_key}/results"
FILTER_PARAM = "filter"

DEFAULT_RESULTS_PER_PAGE = 10
DEFAULT_MIN_FACET_COUNT = 1
FACET_LIMIT = 10
DEFAULT_PAGE_TYPE = "Page"

TYPE_HIERARCHY_FIELD = "ClassNameHierarchy_ms"
PARENTS_HIERARCHY_FIELD = "ParentsHierarchy_ms"
