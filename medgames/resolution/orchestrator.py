"""Resolution of medication mentions to DailyMed labels."""

import dataclasses
import logging
import time
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ..data.dailymed import DailyMedError
from ..data.reference import build_details
from ..models.types import (
    ER,
    UNSPECIFIED_DELIVERY,
    MedicationMention,
    ResolutionResult,
    SearchCandidateRecord,
    SearchLogEntry,
)
from .combinations import expand
from .formulation import check_dosage_availability
from .matcher import match_relaxed, match_strict
from .search_terms import generate, normalize_term

logger = logging.getLogger(__name__)

SEARCH_FAILED = "SEARCH_FAILED"
PROCESSING_ERROR = "PROCESSING_ERROR"
NO_RESULTS = "No results found in DailyMed database"
MAX_SUMMARY = 5


class MedicationResolver:
    """Resolves mentions one at a time with staged strict and relaxed searches."""

    def __init__(
        self,
        search_client: Any,
        request_delay: float = 0.3,
        sleep: Callable[[float], None] = time.sleep,
        strict_top_n: int = 3,
        relaxed_top_n: int = 10,
        verify_dosage: bool = False,
    ):
        """
        Initialize the resolver.

        Args:
            search_client: Anything with search_medications(query)
            request_delay: Seconds to wait between consecutive search calls
            sleep: Sleep function, replaceable in tests
            strict_top_n: Candidates checked per term in the strict pass
            relaxed_top_n: Candidates checked per term in the relaxed pass
            verify_dosage: Re-check ER mentions against available dose strengths
        """
        self.search_client = search_client
        self.request_delay = request_delay
        self.sleep = sleep
        self.strict_top_n = strict_top_n
        self.relaxed_top_n = relaxed_top_n
        self.verify_dosage = verify_dosage
        self._calls = 0

    def _search(self, term: str) -> List[SearchCandidateRecord]:
        if self._calls and self.request_delay > 0:
            self.sleep(self.request_delay)
        self._calls += 1
        return self.search_client.search_medications(term)

    @staticmethod
    def _entry(mention: MedicationMention, search_term: str, **kwargs) -> SearchLogEntry:
        return SearchLogEntry(
            medication=mention.name,
            search_term=search_term,
            requested_formulation=mention.formulation,
            delivery_method=mention.delivery_method or UNSPECIFIED_DELIVERY,
            **kwargs,
        )

    def search_terms_for(self, mention: MedicationMention, extra_terms: Iterable[str] = ()) -> List[str]:
        """
        Generated terms for a mention, preceded by any extra terms that name it.

        Args:
            mention: The mention
            extra_terms: Corrected terms from validation, applied only when they
                contain one of the mention's name components

        Returns:
            Ordered, de-duplicated term list
        """
        components = [c.lower() for c in expand(mention.name.lower())]
        relevant = [
            normalize_term(t) for t in extra_terms
            if t and any(c in t.lower() for c in components)
        ]
        return list(dict.fromkeys(relevant + generate(mention)))

    def _verify_formulation(self, mention: MedicationMention, log: List[SearchLogEntry]) -> MedicationMention:
        term = mention.name.lower()
        try:
            candidates = self._search(term)
        except DailyMedError as e:
            log.append(self._entry(mention, term, found=False, error=f"Search failed: {e}"))
            return mention

        formulation, reasoning = check_dosage_availability(mention, candidates)
        log.append(self._entry(
            mention, term,
            found=bool(candidates),
            result_title=candidates[0].title if candidates else None,
            note=f"dosage check: {reasoning}",
        ))
        if formulation != mention.formulation:
            logger.info("Formulation for %s corrected %s -> %s (%s)",
                        mention.name, mention.formulation, formulation, reasoning)
            return dataclasses.replace(mention, formulation=formulation)
        return mention

    def _strict_pass(self, mention, terms, log, rejected, errors) -> Optional[SearchCandidateRecord]:
        for term in terms:
            logger.info("Searching DailyMed for '%s' (%s formulation)", term, mention.formulation)
            try:
                candidates = self._search(term)
            except DailyMedError as e:
                logger.warning("Search error for '%s': %s", term, e)
                errors.append(f"Error searching '{term}': {e}")
                log.append(self._entry(mention, term, found=False, error=f"Search failed: {e}"))
                continue

            entry = self._entry(
                mention, term,
                found=bool(candidates),
                result_title=candidates[0].title if candidates else None,
            )
            log.append(entry)
            if not candidates:
                entry.error = NO_RESULTS
                continue

            for candidate in candidates[: self.strict_top_n]:
                result = match_strict(mention, candidate)
                if result.accept:
                    logger.info("Found appropriate match: %s for '%s'", candidate.title, term)
                    entry.result_title = candidate.title
                    return candidate
                reason = f"{candidate.title}: {result.reason}"
                entry.rejected_reasons.append(reason)
                rejected.append(reason)

        return None

    def _relaxed_pass(self, mention, log, rejected, errors) -> Optional[SearchCandidateRecord]:
        name = mention.name.lower()
        terms = list(dict.fromkeys(t.strip() for t in (name, name.split("/")[0], name.split("-")[0]) if t.strip()))

        for term in terms:
            label = f"{term} (relaxed)"
            logger.info("Trying relaxed search '%s' (must be %s)", term, mention.formulation)
            try:
                candidates = self._search(term)
            except DailyMedError as e:
                logger.warning("Relaxed search error for '%s': %s", term, e)
                errors.append(f"Error searching '{label}': {e}")
                log.append(self._entry(mention, label, found=False, error=f"Search failed: {e}"))
                continue

            entry = self._entry(
                mention, label,
                found=bool(candidates),
                result_title=candidates[0].title if candidates else None,
            )
            log.append(entry)
            if not candidates:
                entry.error = NO_RESULTS
                continue

            for candidate in candidates[: self.relaxed_top_n]:
                result = match_relaxed(mention, candidate)
                if result.accept:
                    logger.info("Relaxed search found %s (%s compatible)", candidate.title, mention.formulation)
                    entry.result_title = candidate.title
                    entry.note = f"Found with relaxed criteria - {mention.formulation} formulation preserved"
                    return candidate
                reason = f"{candidate.title}: {result.reason}"
                entry.rejected_reasons.append(reason)
                rejected.append(reason)

        return None

    def resolve_one(self, mention: MedicationMention, log: List[SearchLogEntry], extra_terms: Iterable[str] = ()):
        """
        Resolve a single mention, appending every attempt to log.

        Returns:
            ResolvedMedicationDetails, or None if nothing acceptable was found
        """
        if self.verify_dosage and mention.formulation == ER and mention.dosage:
            mention = self._verify_formulation(mention, log)

        terms = self.search_terms_for(mention, extra_terms)
        logger.info("Generated %d search terms for %s (%s): %s",
                    len(terms), mention.name, mention.formulation, terms[:5])

        rejected: List[str] = []
        errors: List[str] = []

        best = self._strict_pass(mention, terms, log, rejected, errors)
        if best is None:
            logger.info("No strict match for %s, trying relaxed search", mention.name)
            best = self._relaxed_pass(mention, log, rejected, errors)

        if best is not None:
            return build_details(best, mention)

        summary = []
        if errors:
            summary.append(f"Search errors: {'; '.join(errors[:MAX_SUMMARY])}")
        if rejected:
            summary.append(f"Found results but all were rejected: {'; '.join(rejected[:MAX_SUMMARY])}")
        failure = "; ".join(summary) or NO_RESULTS
        logger.warning("FAILED to find %s: %s", mention.name, failure)
        log.append(self._entry(
            mention, SEARCH_FAILED,
            found=False,
            error=failure,
            rejected_reasons=rejected[:MAX_SUMMARY],
        ))
        return None

    def resolve_all(
        self,
        mentions: Sequence[MedicationMention],
        extra_terms: Optional[Iterable[str]] = None,
    ) -> ResolutionResult:
        """
        Resolve each mention in order. A failure on one never stops the batch.

        Args:
            mentions: Mentions to resolve
            extra_terms: Optional corrected search terms tried first where relevant

        Returns:
            ResolutionResult with resolved details and the full search log
        """
        extra = list(extra_terms or [])
        outcome = ResolutionResult()

        logger.info("Processing %d medications: %s", len(mentions),
                    [f"{m.name} ({m.delivery_method or 'unspecified delivery method'})" for m in mentions])

        for mention in mentions:
            try:
                details = self.resolve_one(mention, outcome.log, extra)
            except Exception as e:
                logger.exception("Error processing medication %s", mention.name)
                outcome.log.append(self._entry(
                    mention, PROCESSING_ERROR,
                    found=False,
                    error=f"Processing failed: {e}",
                ))
                continue

            if details is not None:
                outcome.results.append(details)

        return outcome

    def resolve_with_validation(
        self,
        patient_info: str,
        mentions: Sequence[MedicationMention],
        validator,
    ):
        """
        Resolve, ask the LLM to validate, and re-run with corrected terms if needed.

        Returns:
            Tuple of (ResolutionResult, ValidationReport)
        """
        first = self.resolve_all(mentions)
        report = validator.validate_matches(patient_info, mentions, first.results)

        if report.validated or not report.corrected_search_terms:
            return first, report

        logger.info("Validation reported %d issue(s), re-running with corrected terms: %s",
                    len(report.issues), report.corrected_search_terms)
        second = self.resolve_all(mentions, extra_terms=report.corrected_search_terms)
        return ResolutionResult(results=second.results, log=first.log + second.log), report
