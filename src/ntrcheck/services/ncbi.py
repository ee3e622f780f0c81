"""NCBI E-utilities adapter for non-human gene lookups.

Docs: https://www.ncbi.nlm.nih.gov/books/NBK25500/
"""

from __future__ import annotations

import logging

import httpx

from ntrcheck.config import config
from ntrcheck.exceptions import GeneLookupError
from ntrcheck.models import GeneRecord

logger = logging.getLogger(__name__)

GENE_LINK = "https://www.ncbi.nlm.nih.gov/gene/{gene_id}"


def _params(**kwargs) -> dict:
    """Build query params, injecting API key and email if configured."""
    p = {k: v for k, v in kwargs.items() if v}
    if config.ncbi.api_key:
        p["api_key"] = config.ncbi.api_key
    if config.ncbi.email:
        p["email"] = config.ncbi.email
    return p


def _check(resp: httpx.Response, endpoint: str) -> None:
    if resp.is_success:
        return
    raise GeneLookupError(
        f"NCBI {endpoint} request failed: {resp.status_code} {resp.reason_phrase}"
    )


async def search_gene_id(http: httpx.AsyncClient, gene_symbol: str, organism: str) -> str | None:
    """Resolve a symbol + organism to the first matching NCBI Gene ID."""
    term = f"{gene_symbol}[Gene Name] AND {organism}[Organism]"
    resp = await http.get(
        f"{config.ncbi.base_url}/esearch.fcgi",
        params=_params(db="gene", term=term, retmode="json"),
    )
    _check(resp, "esearch")
    id_list = (resp.json().get("esearchresult") or {}).get("idlist") or []
    return str(id_list[0]) if id_list else None


async def get_gene_summary(http: httpx.AsyncClient, gene_id: str) -> dict | None:
    """Fetch the esummary document for one gene ID."""
    resp = await http.get(
        f"{config.ncbi.base_url}/esummary.fcgi",
        params=_params(db="gene", id=gene_id, retmode="json"),
    )
    _check(resp, "esummary")
    entry = (resp.json().get("result") or {}).get(gene_id)
    return entry if isinstance(entry, dict) else None


async def search_gene(
    http: httpx.AsyncClient, gene_symbol: str, organism: str
) -> GeneRecord | None:
    """Look up a non-human gene. Returns None when NCBI has no match."""
    gene_id = await search_gene_id(http, gene_symbol, organism)
    if not gene_id:
        logger.info("No NCBI Gene ID found for %s in %s", gene_symbol, organism)
        return None

    entry = await get_gene_summary(http, gene_id)
    if entry is None:
        logger.info("NCBI esummary has no entry for gene ID %s", gene_id)
        return None

    record = GeneRecord(
        source="NCBI",
        gene_id=gene_id,
        gene_name=entry.get("description") or entry.get("name", ""),
        gene_link=GENE_LINK.format(gene_id=gene_id),
    )
    logger.info("NCBI match for %s in %s: %s", gene_symbol, organism, record.gene_id)
    return record
