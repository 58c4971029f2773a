"""ADF document construction and validation."""

from atlas.adf.builder import ADFBuilder, markdown_to_adf, text_to_adf
from atlas.adf.inputs import process_adf_input, process_comment_input, process_description_input
from atlas.adf.models import Document, Mark, MarkType, Node, NodeType
from atlas.adf.parser import Event, EventKind, Tag, parse_events
from atlas.adf.validation import validate_adf

__all__ = [
    # Builder
    "ADFBuilder",
    "markdown_to_adf",
    "text_to_adf",
    # Input handling
    "process_adf_input",
    "process_description_input",
    "process_comment_input",
    "validate_adf",
    # Parser
    "parse_events",
    "Event",
    "EventKind",
    "Tag",
    # Models
    "Document",
    "Node",
    "NodeType",
    "Mark",
    "MarkType",
]
