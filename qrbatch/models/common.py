from enum import Enum

class ExtractionMode(str, Enum):
    numeric = "numeric"
    line = "line"

class SourceKind(str, Enum):
    image = "image"
    spreadsheet = "spreadsheet"
    text = "text"

class AddResult(str, Enum):
    success = "success"
    duplicate = "duplicate"
    invalid = "invalid"
