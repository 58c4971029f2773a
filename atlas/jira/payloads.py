"""Shape Jira REST payloads on their way in and out.

Pure functions over decoded JSON. Outgoing text fields go through the input
dispatcher (fail-fast); incoming ADF fields are rendered to Markdown
(never fails). Transport lives with the caller.
"""

import re
from collections.abc import Mapping
from typing import Any

from atlas.adf.inputs import process_comment_input, process_description_input
from atlas.markdown import adf_to_markdown

_MEDIA_PLACEHOLDER = re.compile(r"\[Media: ([^\]]+)\]")


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, Mapping) else None


def _to_markdown(value: Any) -> Any:
    """Render ADF objects to Markdown; leave strings and nulls as they are."""
    return adf_to_markdown(value) if isinstance(value, Mapping) else value


# === INCOMING ===


def convert_issue_to_markdown(issue: dict[str, Any]) -> None:
    """Replace an issue's ADF `fields.description` with Markdown, in place."""
    fields = _get(issue, "fields")
    if isinstance(fields, dict) and isinstance(fields.get("description"), Mapping):
        fields["description"] = adf_to_markdown(fields["description"])


def convert_issues_to_markdown(result: dict[str, Any]) -> None:
    """Convert every issue in a search result's `items`, in place."""
    items = _get(result, "items")
    if not isinstance(items, list):
        return
    for issue in items:
        convert_issue_to_markdown(issue)


def simplify_issue(data: Mapping[str, Any], as_markdown: bool = True) -> dict[str, Any]:
    fields = _get(data, "fields")
    description = _get(fields, "description")

    return {
        "key": _get(data, "key"),
        "summary": _get(fields, "summary"),
        "type": _get(_get(fields, "issuetype"), "name"),
        "status": _get(_get(fields, "status"), "name"),
        "priority": _get(_get(fields, "priority"), "name"),
        "assignee": _get(_get(fields, "assignee"), "displayName"),
        "reporter": _get(_get(fields, "reporter"), "displayName"),
        "project": _get(_get(fields, "project"), "name"),
        "created": _get(fields, "created"),
        "updated": _get(fields, "updated"),
        "description": _to_markdown(description) if as_markdown else description,
    }


def simplify_comment(comment: Mapping[str, Any], as_markdown: bool = True) -> dict[str, Any]:
    body = _get(comment, "body")
    return {
        "id": _get(comment, "id"),
        "author": _get(_get(comment, "author"), "displayName"),
        "body": _to_markdown(body) if as_markdown else body,
        "created": _get(comment, "created"),
        "updated": _get(comment, "updated"),
    }


def simplify_attachment(attachment: Mapping[str, Any]) -> dict[str, Any]:
    return {key: _get(attachment, key) for key in ("id", "filename", "mimeType", "size", "content")}


def inject_attachment_ids(text: str, attachments: list[Mapping[str, Any]]) -> str:
    """Tag `[Media: <filename>]` placeholders with the id of the attachment of that name.

    "[Media: image.png]" -> "[Media: image.png (id:12345)]". Placeholders with no
    matching attachment (or whose attachment has no string id) are left unchanged.
    """
    ids: dict[str, str] = {}
    for attachment in attachments:
        filename, attachment_id = _get(attachment, "filename"), _get(attachment, "id")
        if isinstance(filename, str) and isinstance(attachment_id, str):
            # First attachment with a given name wins
            ids.setdefault(filename, attachment_id)

    def replace(match: re.Match[str]) -> str:
        filename = match.group(1)
        if filename in ids:
            return f"[Media: {filename} (id:{ids[filename]})]"
        return match.group(0)

    return _MEDIA_PLACEHOLDER.sub(replace, text)


# === OUTGOING ===


def build_issue_fields(project_key: str, summary: str, issue_type: str, description: Any = None) -> dict[str, Any]:
    """The `fields` object of a create-issue request.

    Raises:
        ADFValidationError, InvalidInputError: `description` is not usable as ADF
    """
    return {
        "project": {"key": project_key},
        "summary": summary,
        "issuetype": {"name": issue_type},
        "description": process_description_input(description),
    }


def build_issue_update(fields: Any) -> Any:
    """Convert the `description` of an update-issue `fields` object; other keys pass through."""
    if not isinstance(fields, Mapping) or "description" not in fields:
        return fields
    return {**fields, "description": process_description_input(fields["description"])}


def build_comment_body(body: Any) -> dict[str, Any]:
    """Request body for adding or updating a comment."""
    return {"body": process_comment_input(body)}
