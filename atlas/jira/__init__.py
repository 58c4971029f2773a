from atlas.jira.payloads import (
    build_comment_body,
    build_issue_fields,
    build_issue_update,
    convert_issue_to_markdown,
    convert_issues_to_markdown,
    inject_attachment_ids,
    simplify_attachment,
    simplify_comment,
    simplify_issue,
)

__all__ = [
    "build_comment_body",
    "build_issue_fields",
    "build_issue_update",
    "convert_issue_to_markdown",
    "convert_issues_to_markdown",
    "inject_attachment_ids",
    "simplify_attachment",
    "simplify_comment",
    "simplify_issue",
]
