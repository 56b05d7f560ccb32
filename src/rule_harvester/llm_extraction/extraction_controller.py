"""
Extraction Controller Module
Orchestrates the paragraph-by-paragraph rule extraction workflow.
"""

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from ..data_ingestion import segment
from ..exceptions import EmptyInput, AlreadyComplete, EmptyExport, InferenceError
from ..models import ExtractionState, ExtractionOutcome, RuleFound, Rule
from ..output_generation import RuleFileWriter, build_export_data, export_filename
from ..storage import CredentialStore
from .rule_extractor import RuleExtractor

# Configure logging
logger = logging.getLogger(__name__)


def progress_label(progress: float) -> str:
    """Describe progress as shown next to the progress bar."""
    if progress >= 100:
        return "Processing complete"
    if progress > 0:
        return f"{int(progress + 0.5)}% complete"
    return "Not started"


class ExtractionWorkflow:
    """
    Controller for one extraction session.

    Holds the document text and the ExtractionState, advances through the
    paragraphs one inference call at a time, and owns the rule list that
    delete and export operate on.
    """

    def __init__(self, extractor: RuleExtractor, credential_store: CredentialStore):
        """
        Initialize the workflow.

        Args:
            extractor: Inference collaborator producing one outcome per paragraph
            credential_store: Source of the API key passed to the extractor
        """
        self.extractor = extractor
        self.credential_store = credential_store
        self.document_text = ''
        self.state = ExtractionState()

    @property
    def rules(self) -> List[Rule]:
        return self.state.rules

    @property
    def progress(self) -> float:
        return self.state.progress

    @property
    def is_processing(self) -> bool:
        return self.state.is_processing

    @property
    def can_extract(self) -> bool:
        return not self.state.is_processing and bool(self.document_text)

    @property
    def can_export(self) -> bool:
        return bool(self.state.rules)

    @property
    def remaining(self) -> int:
        return self.state.total - self.state.cursor

    def progress_label(self) -> str:
        return progress_label(self.state.progress)

    def set_document(self, text: str) -> bool:
        """Replace the document text and discard all progress made on the old one.

        The document is locked while an extraction call is in flight; an edit
        made then is ignored.

        Returns:
            bool: True if the document was replaced
        """
        if self.state.is_processing:
            logger.warning("Document is locked while a rule is being extracted")
            return False
        self.document_text = text or ''
        self.reset()
        return True

    def reset(self) -> bool:
        """Return paragraphs, cursor, rules and progress to their initial values.

        Returns:
            bool: False if an extraction call is in flight and nothing was reset
        """
        if self.state.is_processing:
            return False
        self.state.paragraphs = []
        self.state.cursor = 0
        self.state.rules = []
        self.state.progress = 0.0
        logger.debug("Extraction state reset")
        return True

    def initialize_if_needed(self, document_text: str) -> List[str]:
        """Segment the document when extraction has not started yet.

        Args:
            document_text: Text to split into paragraphs

        Returns:
            List[str]: The paragraphs of the current document

        Raises:
            EmptyInput: If the document contains no paragraphs
        """
        if self.state.cursor == 0:
            paragraphs = segment(document_text)
            if not paragraphs:
                logger.warning("No text to process")
                raise EmptyInput()
            self.state.paragraphs = paragraphs
            logger.info(f"Split document into {len(paragraphs)} paragraphs")
        return self.state.paragraphs

    async def extract_next(self) -> Optional[ExtractionOutcome]:
        """Extract a rule from the next unprocessed paragraph.

        A call made while another is still in flight is ignored and returns
        None. On inference failure the cursor stays put, so the same
        paragraph is retried by the next call.

        Returns:
            Optional[ExtractionOutcome]: Outcome for the processed paragraph,
            or None if the call was ignored

        Raises:
            EmptyInput: If the document contains no paragraphs
            AlreadyComplete: If every paragraph has been processed
            InferenceError: If the inference call fails
        """
        if self.state.is_processing:
            logger.debug("Extraction already in progress, ignoring trigger")
            return None

        self.initialize_if_needed(self.document_text)

        if self.state.cursor >= self.state.total:
            raise AlreadyComplete()

        self.state.is_processing = True
        try:
            paragraph = self.state.paragraphs[self.state.cursor]
            logger.info(f"Processing paragraph {self.state.cursor + 1}/{self.state.total}")

            outcome = await self.extractor.extract_rule(paragraph, self.credential_store.get())

            if isinstance(outcome, RuleFound):
                self.state.rules.append(outcome.rule)

            self.state.cursor += 1
            self.state.recompute_progress()
            return outcome
        except InferenceError as e:
            logger.error(f"Error extracting rule: {e}")
            raise
        finally:
            self.state.is_processing = False

    def delete_rule(self, rule_id: str) -> bool:
        """Remove the rule with the given id.

        Returns:
            bool: True if a rule was removed
        """
        for index, rule in enumerate(self.state.rules):
            if rule.id == rule_id:
                del self.state.rules[index]
                logger.info(f"Deleted rule {rule_id}")
                return True
        return False

    def export_rules(self, writer: RuleFileWriter, extension: str = "json", today: Optional[date] = None) -> Path:
        """Hand the rules, without identifiers, to the file writer.

        Args:
            writer: Destination for the exported file
            extension: "json" or "csv"
            today: Date embedded in the filename, defaults to the current UTC date

        Returns:
            Path: Path of the exported file

        Raises:
            EmptyExport: If there are no rules to export
        """
        if not self.state.rules:
            raise EmptyExport()

        export_data = build_export_data(self.state.rules)
        path = writer.write(export_data, export_filename(extension, today))
        logger.info(f"{len(export_data)} rules exported successfully.")
        return path
