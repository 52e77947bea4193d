"""Submission of reports to the collection endpoint."""

from typing import Optional

import httpx
import structlog

from .config import ProbeConfig
from .models import (
    Accepted,
    Rejected,
    SubmissionOutcome,
    SystemReport,
    TransportFailure,
)

logger = structlog.get_logger(__name__)


class Reporter:
    """Posts one report per cycle, best effort and without retries."""

    def __init__(self, config: ProbeConfig, client: Optional[httpx.AsyncClient] = None):
        """Initialize the reporter.

        The HTTP client is created once and reused across cycles so its
        connection pool survives between submissions.
        """
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=config.request_timeout)

    async def submit(self, report: SystemReport) -> SubmissionOutcome:
        """Send the report and classify the response."""
        url = self.config.submit_url
        headers = {
            "Content-Type": "application/json",
            "x-api-token": self.config.token.get_secret_value(),
        }

        logger.debug("Submitting report", url=url)
        try:
            response = await self.client.post(url, content=report.to_wire(), headers=headers)
        except httpx.HTTPError as e:
            logger.error("Failed to submit report", url=url, error=str(e) or repr(e))
            return TransportFailure(detail=str(e) or repr(e))

        if response.is_success:
            logger.info("Report submitted", status_code=response.status_code)
            return Accepted(status_code=response.status_code)

        logger.error(
            "Report rejected",
            status_code=response.status_code,
            body=response.text,
        )
        return Rejected(status_code=response.status_code, body=response.text)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
