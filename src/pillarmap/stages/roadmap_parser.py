"""Roadmap parsing stage: freeform text to canonical record."""

import time
from pathlib import Path

from pillarmap.core.errors import EmptySourceText, SchemaViolation, UpstreamFailure
from pillarmap.core.llm_base import LLMClientBase
from pillarmap.core.logging import get_logger
from pillarmap.core.validator import validate_roadmap
from pillarmap.schemas.roadmap import RoadmapData, roadmap_response_schema

logger = get_logger("pillarmap.stages.roadmap_parser")


class RoadmapParser:
    """Turns roadmap markdown into a validated RoadmapData."""

    def __init__(self, llm_client: LLMClientBase, timeout: int = 120):
        """
        Initialize roadmap parser.

        Args:
            llm_client: Model client for API calls
            timeout: Request timeout in seconds
        """
        self.llm_client = llm_client
        self.timeout = timeout
        self.instruction = self._load_template()
        self.response_schema = roadmap_response_schema()

    def _load_template(self) -> str:
        """Load parse instruction from file."""
        template_path = Path(__file__).parent.parent / "templates" / "parse_instruction.txt"
        return template_path.read_text(encoding="utf-8").strip()

    def parse(self, text: str) -> RoadmapData:
        """
        Parse roadmap text.

        Nothing is retried: a failed or unusable model response fails the
        whole parse.

        Args:
            text: Roadmap text, usually markdown

        Returns:
            Validated RoadmapData

        Raises:
            EmptySourceText: If the text is blank
            UpstreamFailure: If the model call fails or returns no JSON object
            SchemaViolation: If the JSON does not have the roadmap shape
        """
        if not text.strip():
            raise EmptySourceText()

        start_time = time.time()
        logger.log_stage("parse", "started", text_length=len(text))

        try:
            response = self.llm_client.generate(
                text,
                system_instruction=self.instruction,
                response_schema=self.response_schema,
                timeout=self.timeout,
            )
        except UpstreamFailure:
            logger.log_stage("parse", "failed", reason="upstream")
            raise
        except Exception as e:
            logger.log_stage("parse", "failed", reason="upstream")
            raise UpstreamFailure(f"Roadmap parsing request failed: {e}") from e

        try:
            json_data = self.llm_client.extract_json(response)
        except ValueError as e:
            logger.log_stage("parse", "failed", reason="invalid_json")
            raise UpstreamFailure(
                "The AI model returned an invalid data structure. "
                "Please check the input format or try again."
            ) from e

        try:
            roadmap = validate_roadmap(json_data)
        except SchemaViolation:
            logger.log_stage("parse", "failed", reason="schema")
            raise

        logger.log_stage(
            "parse",
            "completed",
            duration_ms=(time.time() - start_time) * 1000,
            pillars=len(roadmap.pillars),
            timeframes=len(roadmap.timeframes),
        )
        return roadmap
