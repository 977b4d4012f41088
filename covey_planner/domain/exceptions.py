"""Domain exceptions raised by the planner core, independent of any framework."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationFailedError(Exception):
    """Raised when a caller-supplied entity is missing a required field.

    Raised before any state is touched, so the collection is unchanged.
    """

    def __init__(self, entity_type: str, errors: list[str]):
        self.entity_type = entity_type
        self.errors = errors
        super().__init__(f"Invalid {entity_type}: {'; '.join(errors)}")


class RemoteStoreError(Exception):
    """Raised when the remote record store fails or is unreachable.

    Store-agnostic: adapters translate their library errors into this.
    """

    def __init__(self, operation: str, table: str, message: str, status_code: int | None = None):
        self.operation = operation
        self.table = table
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{operation} {table}] {message}")


class UnscopedQueryError(Exception):
    """Raised when a store query is issued without an owner filter."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Refusing unscoped query on '{table}': an owner filter is required")


class UnknownTableError(Exception):
    """Raised when a table name is not one of the synced record tables."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Unknown table '{table}'")


class UnknownColumnError(Exception):
    """Raised when a filter, order or patch names a column the table lacks."""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column
        super().__init__(f"Table '{table}' has no column '{column}'")


class RecordOwnershipError(Exception):
    """Raised when a write targets an id that belongs to another owner."""

    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"Record '{record_id}' in '{table}' belongs to another user")
