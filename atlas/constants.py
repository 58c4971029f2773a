"""Tunables for ADF rendering and content cleanup."""

# Block nesting beyond this renders a truncation marker instead of recursing
MAX_DEPTH = 50
TRUNCATION_MARKER = "[Content truncated: max depth exceeded]"

# Upper bound for a table cell's colspan; hostile values must not blow up row width
MAX_TABLE_COLSPAN = 100

# Confluence storage-format cleanup
BASE64_MIN_RUN = 500  # shorter runs are left alone (ids, hashes)
WHITESPACE_MIN_RUN = 10  # alignment padding; delimiters carry the structure

# Latest date node we render, in seconds (year 3000)
MAX_TIMESTAMP_SECONDS = 32503680000

# Link schemes stripped from rendered output
BLOCKED_LINK_SCHEMES = ("javascript:", "vbscript:", "data:")
