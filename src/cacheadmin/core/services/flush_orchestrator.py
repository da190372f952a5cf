"""Flush orchestrator - runs flush submissions for one cache family form."""

import logging
from collections.abc import Mapping

from cacheadmin.core.entities.backend import BackendId, CacheFamily
from cacheadmin.core.entities.config import AdminClientConfig
from cacheadmin.core.entities.display import DisplayModel, SubmitControl
from cacheadmin.core.entities.flush import FlushRequest, FlushResult, FlushState
from cacheadmin.core.exceptions import SubmissionInProgressError, TransportError
from cacheadmin.core.interfaces.transport import IAdminTransport
from cacheadmin.core.services.backend_selector import resolve_backends
from cacheadmin.core.services.result_formatter import ResultFormatter
from cacheadmin.core.services.scope_resolver import resolve_scope

logger = logging.getLogger(__name__)


class FlushOrchestrator:
    """Submits flush requests for a single form (one cache family).

    Each submission moves through ``IDLE -> SUBMITTING -> SUCCEEDED |
    FAILED``. While a submission is outstanding the submit control is
    disabled and any further submission is rejected with
    SubmissionInProgressError, so two flushes from the same form never
    interleave. Forms for different families are independent objects
    and may be in flight at the same time.

    The outcome is all-or-nothing at the transport level: a parsed 2xx
    body is a success even if the payload itself reports
    ``success: false``, and is rendered as returned.
    """

    def __init__(
        self,
        family: CacheFamily,
        transport: IAdminTransport,
        config: AdminClientConfig | None = None,
        formatter: ResultFormatter | None = None,
        submit_label: str = "Flush",
    ) -> None:
        """Initialize the orchestrator.

        Args:
            family: The cache family this form flushes.
            transport: Transport used to reach the admin API.
            config: Optional client configuration. Uses defaults if not provided.
            formatter: Optional result formatter.
            submit_label: Idle label of the submit control.
        """
        self._family = family
        self._transport = transport
        self._config = config or AdminClientConfig()
        self._formatter = formatter or ResultFormatter(
            unknown_error_message=self._config.unknown_error_message
        )

        self._state = FlushState.IDLE
        self._control = SubmitControl(label=submit_label)
        self._display: DisplayModel | None = None
        self._last_result: FlushResult | None = None
        self._last_error: TransportError | None = None

        # Statistics
        self._succeeded = 0
        self._failed = 0
        self._rejected = 0

    @property
    def family(self) -> CacheFamily:
        return self._family

    @property
    def state(self) -> FlushState:
        return self._state

    @property
    def control(self) -> SubmitControl:
        return self._control

    @property
    def display(self) -> DisplayModel | None:
        """The currently displayed outcome, None while submitting or idle."""
        return self._display

    @property
    def last_result(self) -> FlushResult | None:
        return self._last_result

    @property
    def last_error(self) -> TransportError | None:
        return self._last_error

    @property
    def in_flight(self) -> bool:
        return self._state is FlushState.SUBMITTING

    @property
    def stats(self) -> dict[str, int]:
        """Get submission statistics.

        Returns:
            Dictionary with succeeded, failed and rejected submissions.
        """
        return {
            "succeeded": self._succeeded,
            "failed": self._failed,
            "rejected": self._rejected,
        }

    async def submit_form(
        self,
        raw_scope: str | None,
        raw_instance: str | None,
        raw_digest_prefix: str | None,
        flags: Mapping[BackendId | str, bool],
    ) -> FlushResult:
        """Validate raw form input and submit it.

        Validation runs before anything else, so a ValidationError leaves
        the form state untouched and sends nothing.

        Raises:
            ValidationError: If the scope or backend selection is invalid.
            SubmissionInProgressError: If a submission is outstanding.
            TransportError: If the request fails.
        """
        scope = resolve_scope(raw_scope, raw_instance, raw_digest_prefix)
        backends = resolve_backends(self._family, flags)
        return await self.submit(FlushRequest(scope=scope, backends=backends))

    async def submit(self, request: FlushRequest) -> FlushResult:
        """Send a flush request and render its outcome.

        Args:
            request: A validated flush request for this form's family.

        Returns:
            The parsed flush result.

        Raises:
            SubmissionInProgressError: If a submission is outstanding.
            TransportError: On network failure, a non-2xx status, or a
                body that cannot be parsed. The error display is set
                before the error propagates.
        """
        if request.family is not self._family:
            raise ValueError(
                f"{request.family.label} request submitted to the "
                f"{self._family.label} form"
            )

        # No await between the check and the state change.
        if self._state is FlushState.SUBMITTING:
            self._rejected += 1
            logger.info("Rejected %s flush: submission in progress", self._family.value)
            raise SubmissionInProgressError(self._family)

        original_label = self._control.label
        self._state = FlushState.SUBMITTING
        self._control.enabled = False
        self._control.label = self._config.busy_label
        self._display = None

        logger.info(
            "Flushing %s scope=%s backends=%s",
            self._family.value,
            request.scope,
            ",".join(b.value for b in request.backends),
        )

        try:
            data = await self._transport.post_json(
                self._family.flush_path, request.to_payload()
            )
            result = FlushResult.from_payload(self._family, data)
        except TransportError as e:
            self._fail(e)
            raise
        except BaseException:
            # Cancelled or unexpected: the form must not stay stuck in SUBMITTING.
            self._fail(TransportError(self._config.unknown_error_message))
            raise
        finally:
            self._control.enabled = True
            self._control.label = original_label

        self._state = FlushState.SUCCEEDED
        self._succeeded += 1
        self._last_result = result
        self._last_error = None
        self._display = self._formatter.render(result, self._family)

        logger.info(
            "%s flush finished success=%s entries_removed=%d",
            self._family.value,
            result.success,
            result.entries_removed,
        )
        return result

    def _fail(self, error: TransportError) -> None:
        self._state = FlushState.FAILED
        self._failed += 1
        self._last_result = None
        self._last_error = error
        self._display = self._formatter.render_error(error.message)
        logger.warning("%s flush failed: %s", self._family.value, error.message)
