"""DailyMed SPL search client."""

import logging
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from ..models.types import SearchCandidateRecord
from ..resolution.matcher import is_veterinary

logger = logging.getLogger(__name__)

DAILYMED_BASE_URL = "https://dailymed.nlm.nih.gov/dailymed/services/v2"
USER_AGENT = "Medical-Education-App/1.0"

# Labelers ranked ahead of everyone else
HUMAN_PHARMA_LABELERS = (
    "pfizer", "merck", "novartis", "roche", "johnson", "abbvie",
    "bristol", "amgen", "gilead", "biogen", "celgene", "mylan",
    "teva", "sandoz", "apotex", "par", "watson", "actavis",
    "remedyrepack", "cardinal", "mckesson",
)


class DailyMedError(Exception):
    """DailyMed could not be reached or answered with an error status."""


class MalformedResponseError(DailyMedError):
    """DailyMed answered, but the payload is not the expected shape."""


class SplItem(BaseModel):
    setid: str
    title: str
    generic_name: Optional[str] = None
    brand_name: Optional[str] = None
    labeler: Optional[str] = None


class SplSearchPayload(BaseModel):
    data: List[SplItem]


def decode_search_payload(payload: Any) -> List[SearchCandidateRecord]:
    """
    Validate a raw spls.json payload into typed candidate records.

    Args:
        payload: Parsed JSON body

    Returns:
        List of SearchCandidateRecord in upstream order

    Raises:
        MalformedResponseError: If the payload does not match the SPL search shape
    """
    try:
        parsed = SplSearchPayload.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(f"Malformed DailyMed response: {e.error_count()} validation error(s)") from e

    return [
        SearchCandidateRecord(
            set_id=item.setid,
            title=item.title,
            generic_name=item.generic_name,
            brand_name=item.brand_name,
            labeler=item.labeler,
        )
        for item in parsed.data
    ]


def _is_human_pharma(record: SearchCandidateRecord) -> bool:
    labeler = (record.labeler or "").lower()
    return any(k in labeler for k in HUMAN_PHARMA_LABELERS)


class DailyMedClient:
    """Searches DailyMed structured product labels by drug name."""

    def __init__(
        self,
        base_url: str = DAILYMED_BASE_URL,
        timeout: float = 10.0,
        max_results: int = 5,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: DailyMed services root
            timeout: Per-request timeout in seconds
            max_results: Maximum candidates returned per query
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_results = max_results
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

    def search_medications(self, query: str) -> List[SearchCandidateRecord]:
        """
        Search SPLs for a free-text drug name.

        Veterinary products are dropped and well-known human pharma labelers
        are moved to the front, keeping upstream order otherwise.

        Args:
            query: Free-text search term

        Returns:
            Up to max_results candidate records, possibly empty

        Raises:
            DailyMedError: On transport failure or a non-success status
            MalformedResponseError: If the body is not a valid SPL search payload
        """
        url = f"{self.base_url}/spls.json"
        try:
            response = self.session.get(url, params={"drug_name": query}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DailyMedError(f"DailyMed request failed: {e}") from e

        if not response.ok:
            raise DailyMedError(f"DailyMed API error: {response.status_code} {response.reason}")

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError("DailyMed returned a non-JSON body") from e

        records = decode_search_payload(payload)
        human = [r for r in records if not is_veterinary(r.title, r.labeler)]
        # sorted() is stable, so upstream ranking survives within each group
        ranked = sorted(human, key=lambda r: not _is_human_pharma(r))

        logger.debug("DailyMed '%s': %d raw, %d human", query, len(records), len(human))
        return ranked[: self.max_results]
