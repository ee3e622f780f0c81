"""HGNC REST adapter for human gene lookups.

Docs: https://www.genenames.org/help/rest/
"""

from __future__ import annotations

import logging

import httpx

from ntrcheck.config import config
from ntrcheck.exceptions import GeneLookupError
from ntrcheck.models import GeneRecord

logger = logging.getLogger(__name__)

_HEADERS = {"Accept": "application/json"}  # HGNC answers XML otherwise

GENE_LINK = "https://www.genenames.org/data/gene-symbol-report/#!/hgnc_id/{hgnc_id}"


async def fetch_symbol(http: httpx.AsyncClient, gene_symbol: str) -> dict | None:
    """Return the first HGNC document for an approved symbol, or None."""
    resp = await http.get(
        f"{config.hgnc.base_url}/fetch/symbol/{gene_symbol}",
        headers=_HEADERS,
    )
    if resp.status_code == 404:
        return None
    if not resp.is_success:
        raise GeneLookupError(
            f"HGNC API request failed: {resp.status_code} {resp.reason_phrase}"
        )
    docs = (resp.json().get("response") or {}).get("docs") or []
    return docs[0] if docs else None


async def search_gene(http: httpx.AsyncClient, gene_symbol: str) -> GeneRecord | None:
    """Look up a human gene. Returns None when HGNC has no match."""
    doc = await fetch_symbol(http, gene_symbol)
    if doc is None:
        logger.info("No HGNC entry found for symbol %s", gene_symbol)
        return None

    hgnc_id = doc.get("hgnc_id", "")
    record = GeneRecord(
        source="HGNC",
        gene_id=hgnc_id,
        gene_name=doc.get("name", ""),
        gene_link=GENE_LINK.format(hgnc_id=hgnc_id),
    )
    logger.info("HGNC match for %s: %s", gene_symbol, hgnc_id)
    return record
