class SetstrError(Exception):
    """Base exception for setstr errors."""
    pass


class GoSyntaxError(SetstrError):
    """Go source could not be parsed."""
    def __init__(self, file: str, line: int, column: int, message: str):
        super().__init__(f"{file}:{line}:{column}: syntax error: {message}")
        self.file = file
        self.line = line
        self.column = column


class SaveError(SetstrError):
    """Generated code could not be written."""
    pass
