"""Exceptions raised by the functional core."""


class ValidationError(ValueError):
    """A requested change was rejected; state is left as it was."""


class ImportFormatError(ValueError):
    """An import file could not be read as a table at all."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__("format error")
        self.detail = detail
