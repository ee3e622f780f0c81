"""Analysis pipeline — classifies, enriches and analyzes one issue.

Gene workflow:   classify → extract gene query → broker lookup → final analysis
Simple workflow: classify → final analysis

Every run ends with exactly one terminal event (RENDERED or FAILED) that
carries the result and its HTML. Failures never escape the generator.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

import httpx

from ntrcheck.broker import BrokerTransport
from ntrcheck.exceptions import (
    CredentialMissingError,
    EnrichmentTransportError,
    ErrorKind,
    FinalizationError,
    LLMRequestError,
    LLMResponseError,
    NTRCheckError,
)
from ntrcheck.models import (
    AnalysisError,
    AnalysisReport,
    AnalysisResult,
    BrokerFailure,
    BrokerRequest,
    GeneRecord,
    IssueContext,
    PipelineEvent,
    RunState,
    Status,
    Workflow,
)
from ntrcheck.output.html_renderer import render_html
from ntrcheck.pipeline.classifier import extract_gene_query, select_workflow
from ntrcheck.pipeline.prompts import (
    GENE_IDENTIFIER_FIELD,
    build_gene_analysis_prompt,
    build_simple_analysis_prompt,
)
from ntrcheck.pipeline.validation import parse_analysis_payload
from ntrcheck.services import openai_chat

logger = logging.getLogger(__name__)

CREDENTIAL_MISSING_MESSAGE = "OpenAI API Key not set."


def _progress(state: RunState, step: int, total: int, text: str) -> PipelineEvent:
    return PipelineEvent(
        state=state,
        step=step,
        total_steps=total,
        message=f"Step {step}/{total}: {text}",
    )


def _terminal(result: AnalysisResult) -> PipelineEvent:
    if isinstance(result, AnalysisError):
        return PipelineEvent(
            state=RunState.FAILED,
            message=result.error,
            result=result,
            html=render_html(result),
        )
    return PipelineEvent(
        state=RunState.RENDERED,
        message="Analysis complete.",
        result=result,
        html=render_html(result),
    )


async def run_analysis(
    issue: IssueContext,
    *,
    api_key: str | None,
    http: httpx.AsyncClient,
    transport: BrokerTransport,
) -> AsyncGenerator[PipelineEvent, None]:
    """Run one analysis, yielding progress events and one terminal event."""
    if not api_key:
        exc = CredentialMissingError(CREDENTIAL_MISSING_MESSAGE)
        yield _terminal(AnalysisError(error=str(exc), kind=exc.kind))
        return

    try:
        workflow = select_workflow(issue.title)
        logger.info("Workflow for %r: %s", issue.title, workflow.value)

        if workflow == Workflow.GENE:
            yield _progress(RunState.CLASSIFYING, 1, 3, "Extracting gene & species info from title...")
            query = await extract_gene_query(http, issue.title, api_key=api_key)

            if query.is_human:
                request = BrokerRequest(action="lookupHuman", data=query)
                text = f'Searching HGNC for human gene "{query.gene_symbol}"...'
            else:
                request = BrokerRequest(action="lookupNonHuman", data=query)
                text = f'Searching NCBI for gene "{query.gene_symbol}" in {query.animal}...'
            yield _progress(RunState.ENRICHING_GENE, 2, 3, text)

            response = await transport.send(request)
            if isinstance(response, BrokerFailure):
                raise EnrichmentTransportError(response.message)
            record = response.details

            yield _progress(RunState.FINALIZING, 3, 3, "Compiling final analysis...")
            report = await _finalize(
                http,
                build_gene_analysis_prompt(issue.title, issue.body, record),
                api_key=api_key,
                purpose="getFinalAnalysis",
            )
            _log_gene_identifier_divergence(report, record)
        else:
            yield _progress(RunState.CLASSIFYING, 1, 2, "Checking title for a gene marker...")
            yield _progress(RunState.FINALIZING, 2, 2, "Analyzing as a standard term...")
            report = await _finalize(
                http,
                build_simple_analysis_prompt(issue.title, issue.body),
                api_key=api_key,
                purpose="getSimpleAnalysis",
            )
    except NTRCheckError as exc:
        logger.warning("Analysis pipeline failed (%s): %s", exc.kind.value, exc)
        yield _terminal(AnalysisError(error=f"Error during analysis: {exc}", kind=exc.kind))
        return
    except Exception as exc:
        logger.exception("Analysis pipeline failed unexpectedly")
        yield _terminal(AnalysisError(
            error=f"Error during analysis: {type(exc).__name__}: {exc}",
            kind=ErrorKind.UNEXPECTED,
        ))
        return

    yield _terminal(report)


async def analyze_issue(
    issue: IssueContext,
    *,
    api_key: str | None,
    http: httpx.AsyncClient,
    transport: BrokerTransport,
) -> AnalysisResult:
    """Run the pipeline to completion and return the terminal result."""
    result: AnalysisResult | None = None
    async for event in run_analysis(issue, api_key=api_key, http=http, transport=transport):
        if event.is_terminal:
            result = event.result
    if result is None:
        raise RuntimeError("Analysis ended without a terminal event")
    return result


async def _finalize(
    http: httpx.AsyncClient,
    prompt: str,
    *,
    api_key: str,
    purpose: str,
) -> AnalysisReport:
    try:
        payload = await openai_chat.complete_json(http, prompt, api_key=api_key, purpose=purpose)
    except (LLMRequestError, LLMResponseError) as exc:
        raise FinalizationError(str(exc)) from exc
    return parse_analysis_payload(payload)


def _log_gene_identifier_divergence(report: AnalysisReport, record: GeneRecord | None) -> None:
    """The prompt commands the Gene Identifier status; only log if ignored."""
    expected = Status.OK if record is not None else Status.MISSING
    item = report.check(GENE_IDENTIFIER_FIELD)
    actual = (item.status or "").upper() if item else None
    if actual != expected.value:
        logger.warning(
            "Model returned %s for %s; prompt required %s",
            actual, GENE_IDENTIFIER_FIELD, expected.value,
        )
