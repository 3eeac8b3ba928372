from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from campaign_builder.campaign_api import CampaignApiClient, CampaignApiError
from campaign_builder.enums import CampaignStatusEnum
from campaign_builder.schemas import DRAFT_APPROVAL_NOTICE
from campaign_builder.services.wizard import CampaignWizard

logger = logging.getLogger(__name__)


class SubmissionInFlightError(RuntimeError):
    pass


@dataclass
class SubmissionOutcome:
    ok: bool
    campaign_id: str | None = None
    status: CampaignStatusEnum | None = None
    error: str | None = None
    notice: str = DRAFT_APPROVAL_NOTICE


class SubmissionGateway:
    """Hands a finished campaign to ``POST /api/campaigns``, one request at a time."""

    def __init__(self, client: CampaignApiClient) -> None:
        self._client = client
        self._in_flight = False
        self.last_error: str | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def can_submit(self, wizard: CampaignWizard) -> bool:
        return not self._in_flight and wizard.can_submit

    def dismiss_error(self) -> None:
        self.last_error = None

    async def submit(self, wizard: CampaignWizard) -> SubmissionOutcome:
        if self._in_flight:
            raise SubmissionInFlightError("A campaign submission is already in progress")
        try:
            request = wizard.build_request()
        except ValidationError as exc:
            problems = "; ".join(error["msg"] for error in exc.errors())
            logger.info("Campaign is not ready for submission: %s", problems)
            self.last_error = f"Campaign is incomplete: {problems}"
            return SubmissionOutcome(ok=False, error=self.last_error)

        self._in_flight = True
        self.last_error = None
        try:
            logger.info("Submitting campaign %r", request.name)
            campaign_id = await self._client.create_campaign(payload=request)
        except CampaignApiError as exc:
            logger.warning("Campaign submission failed (status=%s): %s", exc.status_code, exc.message)
            self.last_error = exc.message
            return SubmissionOutcome(ok=False, error=exc.message)
        finally:
            self._in_flight = False

        logger.info("Campaign %s created as draft", campaign_id)
        wizard.discard()
        return SubmissionOutcome(ok=True, campaign_id=campaign_id, status=CampaignStatusEnum.draft)

