"""Core data models for the NTR analysis pipeline."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ntrcheck.exceptions import ErrorKind

NEW_TERM_REQUEST_LABEL = "new term request"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class IssueContext(BaseModel):
    """Title and body captured once per analysis run."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str = ""


class IssuePage(BaseModel):
    """Snapshot of a GitHub issue page."""

    url: str = ""
    title: str
    body: str = ""
    labels: list[str] = Field(default_factory=list)

    @property
    def is_new_term_request(self) -> bool:
        return NEW_TERM_REQUEST_LABEL in (label.strip() for label in self.labels)

    def context(self) -> IssueContext:
        return IssueContext(title=self.title, body=self.body)


# ---------------------------------------------------------------------------
# Gene enrichment
# ---------------------------------------------------------------------------

class Workflow(StrEnum):
    GENE = "gene"
    SIMPLE = "simple"


class GeneQuery(BaseModel):
    """Gene symbol and optional non-human organism extracted from a title.

    ``animal`` set means the gene is non-human. ``gene_symbol`` unset means
    no lookup is attempted.
    """

    model_config = ConfigDict(populate_by_name=True)

    gene_symbol: str | None = Field(default=None, alias="geneSymbol")
    animal: str | None = None

    @property
    def is_human(self) -> bool:
        return self.animal is None


class GeneRecord(BaseModel):
    """Verified gene identity from NCBI Gene or HGNC."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: Literal["NCBI", "HGNC"]
    gene_id: str = Field(alias="geneId")
    gene_name: str = Field(alias="geneName")
    gene_link: str = Field(alias="geneLink")


# ---------------------------------------------------------------------------
# Analysis result
# ---------------------------------------------------------------------------

class Status(StrEnum):
    OK = "OK"
    MISSING = "MISSING"
    INCOMPLETE = "INCOMPLETE"
    INVALID_FORMAT = "INVALID_FORMAT"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class RecommendedAction(StrEnum):
    READY_FOR_CURATOR = "READY_FOR_CURATOR"
    NEEDS_MORE_INFO = "NEEDS_MORE_INFO"
    OUT_OF_SCOPE = "OUT_OF_SCOPE"


class CheckItem(BaseModel):
    # status stays free text: unrecognized values must reach the renderer
    field: str
    status: str | None = None
    comment: str | None = None


class AnalysisReport(BaseModel):
    """Success shape of an analysis result."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str | None = None
    checks: list[CheckItem]
    recommended_action: str | None = Field(default=None, alias="recommendedAction")
    action_comment: str | None = Field(default=None, alias="actionComment")

    def check(self, field: str) -> CheckItem | None:
        for item in self.checks:
            if item.field == field:
                return item
        return None


class AnalysisError(BaseModel):
    """Error shape of an analysis result."""

    error: str
    kind: ErrorKind = ErrorKind.UNEXPECTED


AnalysisResult = Union[AnalysisReport, AnalysisError]


# ---------------------------------------------------------------------------
# Pipeline events
# ---------------------------------------------------------------------------

class RunState(StrEnum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    ENRICHING_GENE = "enriching_gene"
    FINALIZING = "finalizing"
    RENDERED = "rendered"
    FAILED = "failed"


class PipelineEvent(BaseModel):
    state: RunState
    message: str = ""
    step: int = 0
    total_steps: int = 0
    result: AnalysisReport | AnalysisError | None = None
    html: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (RunState.RENDERED, RunState.FAILED)


# ---------------------------------------------------------------------------
# Broker messages
# ---------------------------------------------------------------------------

BrokerAction = Literal["lookupHuman", "lookupNonHuman"]


class BrokerRequest(BaseModel):
    action: BrokerAction
    data: GeneQuery


class BrokerSuccess(BaseModel):
    status: Literal["success"] = "success"
    details: GeneRecord | None = None


class BrokerFailure(BaseModel):
    status: Literal["error"] = "error"
    message: str


BrokerResponse = Union[BrokerSuccess, BrokerFailure]
