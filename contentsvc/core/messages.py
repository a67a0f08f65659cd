"""Table des codes et messages d'erreur par opération de cycle de vie.

Chaque opération expose un couple (code, message) pour les paramètres manquants et un couple pour
l'échec côté provider; ces valeurs ne sont utilisées que si le provider ne fournit pas les siennes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OperationMessages:
    """Codes/messages de repli d'une opération."""

    missing_code: str
    missing_message: str
    failed_code: str
    failed_message: str


def _messages(prefix: str, action: str) -> OperationMessages:
    return OperationMessages(
        missing_code=f"ERR_{prefix}_FIELDS_MISSING",
        missing_message=f"Required fields for {action} are missing",
        failed_code=f"ERR_{prefix}_FAILED",
        failed_message=f"Failed to {action}",
    )


SEARCH = _messages("CONTENT_SEARCH", "search content")
CREATE = _messages("CONTENT_CREATE", "create content")
UPDATE = _messages("CONTENT_UPDATE", "update content")
REVIEW = _messages("CONTENT_REVIEW", "send content for review")
PUBLISH = _messages("CONTENT_PUBLISH", "publish content")
UNLISTED_PUBLISH = _messages("CONTENT_UNLISTED_PUBLISH", "publish content as unlisted")
REJECT = _messages("CONTENT_REJECT", "reject content")
RETIRE = _messages("CONTENT_RETIRE", "retire content")
COPY = _messages("CONTENT_COPY", "copy content")
GET = _messages("CONTENT_GET", "get content")
GET_MY = _messages("CONTENT_GET_MY", "get user content")
ACCEPT_FLAG = _messages("CONTENT_ACCEPT_FLAG", "accept content flag")
REJECT_FLAG = _messages("CONTENT_REJECT_FLAG", "reject content flag")
UPLOAD_URL = _messages("CONTENT_UPLOAD_URL", "get content upload url")
ASSIGN_BADGE = _messages("CONTENT_ASSIGN_BADGE", "assign badge")
REVOKE_BADGE = _messages("CONTENT_REVOKE_BADGE", "revoke badge")
SEARCH_PLUGINS = _messages("PLUGIN_SEARCH", "search plugins")
FRAMEWORK = _messages("FRAMEWORK_READ", "read framework")
LOCK = _messages("CONTENT_LOCK_VALIDATE", "validate content lock")

INVALID_USER_CODE = "ERR_CONTENT_OWNER_MISMATCH"
INVALID_USER_MESSAGE = "User is not the creator of every content in the request"
RETIRE_MULTIPLE_FAILURES_CODE = "ERR_CONTENT_RETIRE_MULTIPLE_FAILURES"

BADGE_EXISTS_MESSAGE = "badge already exist"
BADGE_MISSING_MESSAGE = "badge not exist"

LOCK_FETCH_FAILED = "Unable to fetch content details"
LOCK_NOT_DRAFT = "The operation cannot be completed as content is not in draft state"
LOCK_NOT_AUTHORIZED = "You are not authorized"
LOCK_VALIDATED = "Content successfully validated"
