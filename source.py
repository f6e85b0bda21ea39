"""
Line cleanup and classification for TMIPS source lines.

Comments start at '#' and run to the end of the line.
"""

BLANK = "blank"
COMMENT = "comment"
SECTION = "section"
LABELED = "labeled"
UNLABELED = "unlabeled"

SECTIONS = (".text", ".data")


def is_blank(line):
    return not line.strip(" \t\r\n")


def has_comment(line):
    return "#" in line


def is_comment(line):
    return line.lstrip(" \t").startswith("#")


def strip_comment(line):
    return line.split("#", 1)[0]


def clean_line(line):
    if has_comment(line):
        line = strip_comment(line)
    return line.strip()


def section_of(line):
    """'.text' / '.data' when the cleaned line is a section directive, else None."""
    parts = clean_line(line).split()
    if parts and parts[0] in SECTIONS:
        return parts[0]
    return None


def has_label(line, data=False):
    text = clean_line(line)
    if not text:
        return False
    first = text.split()[0]
    if data:
        # data lines read "label directive args"; a leading '.' means no label
        return not first.startswith(".")
    return ":" in first


def classify(line, data=False):
    if is_blank(line):
        return BLANK
    if is_comment(line):
        return COMMENT
    if section_of(line):
        return SECTION
    return LABELED if has_label(line, data) else UNLABELED


def split_label(line, data=False):
    """(label or None, rest) of a cleaned line; the label loses its colon."""
    text = clean_line(line)
    if not has_label(text, data):
        return None, text
    if data:
        parts = text.split(None, 1)
        label = parts[0]
        rest = parts[1] if len(parts) > 1 else ""
        if label.endswith(":"):
            label = label[:-1]
        return label, rest
    label, rest = text.split(":", 1)
    return label.strip(), rest.strip()
