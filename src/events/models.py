"""
Webhook Event Models.

Typed views over the GitHub webhook payloads that can trigger a
reconciliation. Only the fields the reconciler reads are declared; the
rest of each payload is ignored.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from errors import PayloadError


class PayloadModel(BaseModel):
    """Base model ignoring undeclared payload fields."""

    model_config = ConfigDict(extra="ignore")


class Owner(PayloadModel):
    login: str


class RepositoryRef(PayloadModel):
    name: str
    owner: Owner


class PullRequestNumber(PayloadModel):
    number: int


class CheckRun(PayloadModel):
    pull_requests: List[PullRequestNumber] = []


class BranchRef(PayloadModel):
    ref: str


class PullRequestPayload(PayloadModel):
    merged: Optional[bool] = False
    base: BranchRef


class Label(PayloadModel):
    name: str


class Review(PayloadModel):
    state: str


class WebhookEvent(PayloadModel):
    """Fields shared by every supported event."""

    repository: RepositoryRef

    @property
    def owner(self) -> str:
        return self.repository.owner.login

    @property
    def repo(self) -> str:
        return self.repository.name


class CheckRunEvent(WebhookEvent):
    """``check_run`` event."""

    action: str
    check_run: CheckRun


class PullRequestEvent(WebhookEvent):
    """``pull_request`` event, ``label`` is only present for labeling actions."""

    action: str
    number: int
    pull_request: PullRequestPayload
    label: Optional[Label] = None


class PullRequestReviewEvent(WebhookEvent):
    """``pull_request_review`` event."""

    action: str
    review: Review
    pull_request: PullRequestNumber


class StatusEvent(WebhookEvent):
    """``status`` event."""

    state: str
    sha: str


Event = Union[CheckRunEvent, PullRequestEvent, PullRequestReviewEvent, StatusEvent]

EVENT_MODELS = {
    "check_run": CheckRunEvent,
    "pull_request": PullRequestEvent,
    "pull_request_review": PullRequestReviewEvent,
    "status": StatusEvent,
}


def parse_event(event_name: str, payload: Dict[str, Any]) -> Optional[Event]:
    """
    Parse a webhook payload into its event model.

    Args:
        event_name (str): Webhook event name, e.g. ``check_run``
        payload (Dict[str, Any]): Decoded JSON payload

    Returns:
        Optional[Event]: Parsed event, or None for unsupported event names

    Raises:
        PayloadError: If the payload lacks a required field
    """
    model = EVENT_MODELS.get(event_name)
    if model is None:
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise PayloadError(f"Malformed {event_name} payload: {e}") from e
