"""
Exception hierarchy for FileAnalysis
"""


class FileAnalysisError(Exception):
    """Base class for all FileAnalysis errors"""


class FatalConfigError(FileAnalysisError):
    """Configuration problem that aborts the whole run"""


class InvalidDirectoryError(FatalConfigError):
    def __init__(self, path: str):
        super().__init__(f"Directory '{path}' does not exist.")
        self.path = path


class UnknownFilterError(FatalConfigError):
    def __init__(self, flag: str):
        super().__init__(f"Unknown filter '{flag}'.")
        self.flag = flag


class InvalidFilterValueError(FatalConfigError):
    def __init__(self, flag: str, value, reason: str):
        super().__init__(f"Invalid value {value!r} for filter '{flag}': {reason}")
        self.flag = flag
        self.value = value
        self.reason = reason


class ExtractionError(FileAnalysisError):
    """Metadata for a single file could not be read"""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Could not read metadata for {path}: {cause}")
        self.path = path
        self.cause = cause
