"""ADF <-> Markdown conversion for the Atlassian Jira and Confluence client."""
