"""Tests for the NCBI non-human gene adapter."""

import httpx
import pytest
import respx

from ntrcheck.exceptions import GeneLookupError
from ntrcheck.services.ncbi import search_gene

ESEARCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"
ESUMMARY_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esummary.fcgi"


async def test_ncbi_two_step_lookup(esearch_response, esummary_response):
    async with respx.mock:
        search = respx.get(ESEARCH_URL).respond(json=esearch_response)
        summary = respx.get(ESUMMARY_URL).respond(json=esummary_response)

        async with httpx.AsyncClient() as http:
            record = await search_gene(http, "KIT", "Felis catus")

    term = search.calls.last.request.url.params["term"]
    assert term == "KIT[Gene Name] AND Felis catus[Organism]"
    assert summary.calls.last.request.url.params["id"] == "751817"
    assert record.source == "NCBI"
    assert record.gene_id == "751817"
    assert record.gene_name == "KIT proto-oncogene, receptor tyrosine kinase"
    assert record.gene_link == "https://www.ncbi.nlm.nih.gov/gene/751817"


async def test_ncbi_no_id_skips_summary():
    async with respx.mock:
        respx.get(ESEARCH_URL).respond(json={"esearchresult": {"count": "0", "idlist": []}})
        summary = respx.get(ESUMMARY_URL).respond(json={})

        async with httpx.AsyncClient() as http:
            record = await search_gene(http, "NOTAGENE", "Felis catus")

    assert record is None
    assert not summary.called


async def test_ncbi_missing_summary_entry(esearch_response):
    async with respx.mock:
        respx.get(ESEARCH_URL).respond(json=esearch_response)
        respx.get(ESUMMARY_URL).respond(json={"result": {"uids": []}})

        async with httpx.AsyncClient() as http:
            record = await search_gene(http, "KIT", "Felis catus")

    assert record is None


async def test_ncbi_esearch_failure_raises():
    async with respx.mock:
        respx.get(ESEARCH_URL).respond(status_code=503)

        async with httpx.AsyncClient() as http:
            with pytest.raises(GeneLookupError, match="esearch"):
                await search_gene(http, "KIT", "Felis catus")


async def test_ncbi_esummary_failure_raises(esearch_response):
    async with respx.mock:
        respx.get(ESEARCH_URL).respond(json=esearch_response)
        respx.get(ESUMMARY_URL).respond(status_code=429)

        async with httpx.AsyncClient() as http:
            with pytest.raises(GeneLookupError, match="esummary"):
                await search_gene(http, "KIT", "Felis catus")
