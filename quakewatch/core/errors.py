class QuakeWatchError(Exception):
    """Base class for detection pipeline errors."""


class InsufficientDataError(QuakeWatchError):
    def __init__(self, rows: int, min_rows: int):
        self.rows = rows
        self.min_rows = min_rows
        super().__init__(f"dataset has {rows} usable rows, at least {min_rows} required")


class InvalidParameterError(QuakeWatchError):
    def __init__(self, name: str, value: object, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r} {reason}")
