"""Built-in field operations for migration steps."""

from dataclasses import dataclass
from typing import Any, Callable

from docmigrate.migrations.base import MigrationOperation


@dataclass
class AddField(MigrationOperation):
    """Set a field when the document does not have it yet.

    Example:
        AddField("is_active", default=True)
    """

    field_name: str
    default: Any = None
    default_factory: Callable[[], Any] | None = None

    def forward(self, data: dict) -> dict:
        if self.field_name in data:
            return data
        result = data.copy()
        result[self.field_name] = (
            self.default_factory() if self.default_factory else self.default
        )
        return result


@dataclass
class RemoveField(MigrationOperation):
    """Drop a field.

    Example:
        RemoveField("legacy_flag")
    """

    field_name: str

    def forward(self, data: dict) -> dict:
        result = data.copy()
        result.pop(self.field_name, None)
        return result


@dataclass
class RenameField(MigrationOperation):
    """Move a field's value under a new name.

    Example:
        RenameField("mail", "email")
    """

    old_name: str
    new_name: str

    def forward(self, data: dict) -> dict:
        result = data.copy()
        if self.old_name in result:
            result[self.new_name] = result.pop(self.old_name)
        return result


@dataclass
class TransformField(MigrationOperation):
    """Rewrite a field value with a function; missing fields are left alone.

    Example:
        TransformField("price", func=lambda x: round(x * 100))
    """

    field_name: str
    func: Callable[[Any], Any]

    def forward(self, data: dict) -> dict:
        result = data.copy()
        if self.field_name in result:
            result[self.field_name] = self.func(result[self.field_name])
        return result


@dataclass
class ConditionalTransform(MigrationOperation):
    """Apply another operation only to documents matching a predicate.

    Example:
        ConditionalTransform(
            condition=lambda doc: doc.get("type") == "premium",
            operation=AddField("premium_features", default=[]),
        )
    """

    condition: Callable[[dict], bool]
    operation: MigrationOperation

    def forward(self, data: dict) -> dict:
        if self.condition(data):
            return self.operation.forward(data)
        return data
