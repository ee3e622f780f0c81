"""Prompt builders for the extraction and final analysis calls."""

from __future__ import annotations

from ntrcheck.models import GeneRecord, RecommendedAction, Status

GENE_IDENTIFIER_FIELD = "Gene Identifier"

BASE_CHECK_FIELDS = [
    "Term Label",
    "Attribution (ORCID)",
    "Parent Term",
    "Definition",
    "Synonyms",
]

GENE_CHECK_FIELDS = [*BASE_CHECK_FIELDS, GENE_IDENTIFIER_FIELD]

_ALLOWED_STATUSES = ", ".join(
    f'"{s}"' for s in (Status.OK, Status.MISSING, Status.INCOMPLETE, Status.INVALID_FORMAT)
)

_RESULT_SHAPE = (
    'Return your analysis as a JSON object with the exact structure: '
    '{"summary": "...", "checks": [{"field": "...", "status": "...", "comment": "..."}], '
    '"recommendedAction": "...", "actionComment": "..."}.'
)

_ACTIONS = (
    'The "recommendedAction" value MUST be one of these exact strings: '
    + ", ".join(f'"{a}"' for a in RecommendedAction)
    + "."
)


def build_gene_extraction_prompt(title: str) -> str:
    return (
        "Your job is to extract a gene symbol and potentially a non-human animal "
        f'from a GitHub issue title. The title is: "{title}". '
        '1. Look for a short, all-caps gene symbol (e.g., "KIT", "STX17"). '
        "2. Look for a non-human animal. If found, provide its scientific name "
        '(e.g., "feline" -> "Felis catus", "canine" -> "Canis lupus familiaris"). '
        "If no non-human animal is mentioned, assume the context is human. "
        'Return a JSON object like {"animal": "...", "geneSymbol": "..."}. '
        'If the context is human, return {"animal": null, "geneSymbol": "..."}. '
        'If no gene symbol can be found, return {"geneSymbol": null}. '
        "Return ONLY the JSON object."
    )


def _field_list(fields: list[str]) -> str:
    return ", ".join(f'"{f}"' for f in fields)


def build_gene_context(record: GeneRecord | None) -> str:
    """Verified-facts paragraph that commands the Gene Identifier status."""
    if record is not None:
        return "\n".join([
            "A search for the gene in the title was performed. The following verified "
            f"information was found from {record.source}:",
            f"- Gene ID: {record.gene_id}",
            f'- Full Gene Name: "{record.gene_name}"',
            f"- Link: {record.gene_link}",
            f'For the "{GENE_IDENTIFIER_FIELD}" check, the status MUST be "OK".',
        ])
    return (
        "A search for the gene in the title was performed, but no matching ID was found "
        "from the relevant database (NCBI or HGNC). "
        f'For the "{GENE_IDENTIFIER_FIELD}" check, the status MUST be "MISSING".'
    )


def build_gene_analysis_prompt(title: str, body: str, record: GeneRecord | None) -> str:
    lines = [
        "You are an expert ontology curator. Analyze the following GitHub issue "
        "using the information I provide.",
        f"The issue title is: {title}",
        build_gene_context(record),
        "The issue body is below:",
        "---",
        body,
        "---",
        _RESULT_SHAPE,
        f'The "checks" array MUST contain these six fields in this order: '
        f"{_field_list(GENE_CHECK_FIELDS)}.",
        f'For EACH item in the "checks" array, the "status" value MUST be one of these '
        f"exact strings: {_ALLOWED_STATUSES}.",
        _ACTIONS,
        f'For the "{GENE_IDENTIFIER_FIELD}" comment, you MUST include the source '
        "(NCBI/HGNC), the full gene name, and the link if they were found. "
        "If nothing was found, state that.",
    ]
    return "\n".join(lines)


def build_simple_analysis_prompt(title: str, body: str) -> str:
    lines = [
        "You are an expert ontology curator. Analyze the following GitHub issue.",
        f"The issue title is: {title}",
        "The issue body is below:",
        "---",
        body,
        "---",
        _RESULT_SHAPE,
        f'The "checks" array MUST contain these five fields in this order: '
        f"{_field_list(BASE_CHECK_FIELDS)}.",
        f'For each check, the "status" value MUST be one of these exact strings: '
        f"{_ALLOWED_STATUSES}.",
        _ACTIONS,
    ]
    return "\n".join(lines)
