"""Service for table reservations.

A visitor submits a reservation, which is stored as pending and announced to
the restaurant by email with signed approve/reject links. An admin decides
either from the dashboard or by following one of those links; the guest is
then emailed the outcome. Emails are fire-and-forget: a failed send is
reported to the caller but never rolls back the status change.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from restaurant_site_service.auth.action_links import ActionLinkSigner
from restaurant_site_service.models.booking_models import (
    Reservation,
    ReservationCreate,
    ReservationDecision,
    ReservationStatus,
)
from restaurant_site_service.observability import traced
from restaurant_site_service.repositories.booking_repositories import ReservationRepository
from restaurant_site_service.services.email_client import EmailClient
from restaurant_site_service.services.email_templates import (
    RESERVATION_ACTION_RESULT_TEMPLATE,
    RESERVATION_REQUEST_TEMPLATE,
    RESERVATION_STATUS_TEMPLATE,
    TemplateRenderer,
)

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of a reservation submission.

    Attributes:
        reservation: The stored reservation
        admin_notified: Whether the restaurant notification email was sent
    """

    reservation: Reservation
    admin_notified: bool


class ReservationService:
    """Reservation workflow: submission, listing and approve/reject decisions."""

    def __init__(
        self,
        repository: ReservationRepository,
        email_client: EmailClient,
        renderer: TemplateRenderer,
        link_signer: ActionLinkSigner,
        admin_email: str | None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Reservation repository
            email_client: Transactional email client
            renderer: Email template renderer
            link_signer: Signer for approve/reject links
            admin_email: Address notified of new reservations (None disables)
        """
        self.repository = repository
        self.email_client = email_client
        self.renderer = renderer
        self.link_signer = link_signer
        self.admin_email = admin_email

    @traced("submit_reservation")
    async def submit(self, payload: ReservationCreate) -> SubmissionResult:
        """Store a new pending reservation and notify the restaurant.

        Args:
            payload: Validated reservation form

        Returns:
            SubmissionResult with the stored reservation

        Raises:
            RepositoryError: If the reservation cannot be stored
        """
        now = datetime.now(UTC)
        reservation = Reservation(
            id=uuid4().hex,
            name=payload.name,
            phone=payload.phone,
            email=payload.email,
            reservation_date=payload.reservation_date,
            time=payload.time,
            comments=payload.comments or None,
            status=ReservationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        created = self.repository.create(reservation)
        logger.info(f"Reservation {created.id} submitted for {created.reservation_date.isoformat()}")

        admin_notified = await self._notify_admin(created)
        return SubmissionResult(reservation=created, admin_notified=admin_notified)

    async def _notify_admin(self, reservation: Reservation) -> bool:
        if not self.admin_email:
            logger.warning("ADMIN_EMAIL not configured, skipping reservation notification")
            return False

        rendered = await self.renderer.render(
            RESERVATION_REQUEST_TEMPLATE,
            reservation=reservation,
            approve_url=self.link_signer.build_url(reservation.id, ReservationStatus.APPROVED),
            reject_url=self.link_signer.build_url(reservation.id, ReservationStatus.REJECTED),
            link_ttl_days=self.link_signer.ttl.days,
        )
        result = await self.email_client.send(
            self.admin_email, rendered.subject, rendered.html, template=RESERVATION_REQUEST_TEMPLATE
        )
        return result.success

    async def list_reservations(self) -> list[Reservation]:
        """All reservations, newest first."""
        return self.repository.list_all()

    @traced("decide_reservation")
    async def decide(self, reservation_id: str, status: ReservationStatus) -> ReservationDecision | None:
        """Approve or reject a reservation and email the guest.

        Args:
            reservation_id: Reservation identifier
            status: APPROVED or REJECTED

        Returns:
            ReservationDecision with the email outcome, or None if not found

        Raises:
            ValueError: If status is not a decision status
            RepositoryError: If the update fails
        """
        if status not in (ReservationStatus.APPROVED, ReservationStatus.REJECTED):
            raise ValueError("Invalid status. Must be 'approved' or 'rejected'")

        updated = self.repository.update_status(reservation_id, status, datetime.now(UTC))
        if updated is None:
            return None

        logger.info(f"Reservation {reservation_id} updated to {status.value}")

        rendered = await self.renderer.render(
            RESERVATION_STATUS_TEMPLATE,
            reservation=updated,
            approved=status is ReservationStatus.APPROVED,
        )
        result = await self.email_client.send(
            updated.email, rendered.subject, rendered.html, template=RESERVATION_STATUS_TEMPLATE
        )

        if not result.success:
            logger.warning(f"Reservation {reservation_id} updated but guest email failed to send")

        return ReservationDecision(**updated.model_dump(), email_sent=result.success)

    async def render_action_result(self, decision: ReservationDecision) -> str:
        """Render the confirmation page shown after following an email link."""
        rendered = await self.renderer.render(
            RESERVATION_ACTION_RESULT_TEMPLATE,
            reservation=decision,
            approved=decision.status is ReservationStatus.APPROVED,
            email_sent=decision.email_sent,
        )
        return rendered.html
