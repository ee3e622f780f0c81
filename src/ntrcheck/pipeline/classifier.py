"""Title classifier — picks the workflow and extracts the gene query."""

from __future__ import annotations

import logging

import httpx

from ntrcheck.exceptions import (
    ClassificationError,
    LLMRequestError,
    LLMResponseError,
    MissingGeneSymbolError,
)
from ntrcheck.models import GeneQuery, Workflow
from ntrcheck.pipeline.prompts import build_gene_extraction_prompt
from ntrcheck.services import openai_chat

logger = logging.getLogger(__name__)

GENE_MARKER = "[NTR/gene]"

_HUMAN_NAMES = {"human", "humans", "homo sapiens"}


def select_workflow(title: str) -> Workflow:
    """Gene workflow iff the trimmed title starts with the [NTR/gene] marker."""
    if title.strip().startswith(GENE_MARKER):
        return Workflow.GENE
    return Workflow.SIMPLE


def gene_query_from_payload(payload: dict) -> GeneQuery:
    """Turn the extraction model's JSON into a GeneQuery.

    Raises MissingGeneSymbolError when no usable symbol is present.
    """
    symbol = payload.get("geneSymbol")
    if not isinstance(symbol, str) or not symbol.strip():
        raise MissingGeneSymbolError(
            f"Title starts with {GENE_MARKER} but could not extract a gene symbol."
        )

    animal = payload.get("animal")
    if not isinstance(animal, str) or not animal.strip():
        animal = None
    elif animal.strip().lower() in _HUMAN_NAMES:
        animal = None
    else:
        animal = animal.strip()

    return GeneQuery(gene_symbol=symbol.strip(), animal=animal)


async def extract_gene_query(
    http: httpx.AsyncClient,
    title: str,
    *,
    api_key: str,
) -> GeneQuery:
    """Ask the model for {animal, geneSymbol} and validate the answer."""
    try:
        payload = await openai_chat.complete_json(
            http,
            build_gene_extraction_prompt(title),
            api_key=api_key,
            purpose="extractGeneInfo",
        )
    except (LLMRequestError, LLMResponseError) as exc:
        raise ClassificationError(str(exc)) from exc

    query = gene_query_from_payload(payload)
    logger.info("Extracted gene query: symbol=%s animal=%s", query.gene_symbol, query.animal)
    return query
