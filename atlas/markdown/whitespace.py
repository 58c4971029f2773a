def normalize_whitespace(text: str) -> str:
    """Collapse runs of blank lines to one and trim blank lines at both ends.

    Whitespace-only lines count as blank and are emptied.
    """
    lines: list[str] = []
    previous_blank = False

    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if not line.strip():
            if not previous_blank:
                lines.append("")
            previous_blank = True
        else:
            lines.append(line)
            previous_blank = False

    start = 0
    while start < len(lines) and not lines[start]:
        start += 1
    end = len(lines)
    while end > start and not lines[end - 1]:
        end -= 1

    return "\n".join(lines[start:end])
