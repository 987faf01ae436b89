class SpreadsheetReadError(Exception):
    """The uploaded spreadsheet could not be opened or has no readable sheet."""


class DuplicateSerialError(ValueError):
    """A tire with the same serial number already exists."""

    def __init__(self, serial_number: str) -> None:
        super().__init__(f"Serial number {serial_number} already exists")
        self.serial_number = serial_number


class RecordNotFoundError(LookupError):
    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} with id {record_id} not found")
        self.kind = kind
        self.record_id = record_id
