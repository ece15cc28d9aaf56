"""Tests for migration steps built from field operations."""

import pytest

from docmigrate.migrations.base import MigrationStep
from docmigrate.migrations.operations import (
    AddField,
    ConditionalTransform,
    RemoveField,
    RenameField,
    TransformField,
)


class TestMigrationOperations:
    """Tests for the built-in operations."""

    def test_add_field(self):
        """Test AddField operation."""
        op = AddField(field_name="new_field", default="default")

        result = op.forward({"name": "test"})

        assert result == {"name": "test", "new_field": "default"}

    def test_add_field_existing_field(self):
        """Test AddField doesn't overwrite existing field."""
        op = AddField(field_name="existing", default="default")

        result = op.forward({"existing": "original"})

        assert result["existing"] == "original"

    def test_add_field_default_factory(self):
        """Each document gets its own default from the factory."""
        op = AddField(field_name="tags", default_factory=list)

        first = op.forward({})
        second = op.forward({})

        assert first["tags"] == []
        assert first["tags"] is not second["tags"]

    def test_remove_field(self):
        """Test RemoveField operation."""
        op = RemoveField(field_name="old_field")

        data = {"name": "test", "old_field": "value"}
        result = op.forward(data)

        assert result == {"name": "test"}
        assert "old_field" in data

    def test_rename_field(self):
        """Test RenameField operation."""
        op = RenameField(old_name="old_name", new_name="new_name")

        result = op.forward({"old_name": "value", "other": "data"})

        assert result == {"new_name": "value", "other": "data"}

    def test_rename_field_not_present(self):
        """Test RenameField when old field doesn't exist."""
        op = RenameField(old_name="nonexistent", new_name="new_name")

        assert op.forward({"other": "data"}) == {"other": "data"}

    def test_transform_field(self):
        """Test TransformField operation."""
        op = TransformField(field_name="status", func=lambda x: x.upper())

        assert op.forward({"status": "active"})["status"] == "ACTIVE"

    def test_transform_field_missing_field(self):
        """Test TransformField when field is missing."""
        op = TransformField(field_name="missing", func=lambda x: x.upper())

        assert "missing" not in op.forward({"other": "value"})

    def test_conditional_transform(self):
        """The wrapped operation only runs on matching documents."""
        op = ConditionalTransform(
            condition=lambda doc: doc.get("type") == "premium",
            operation=AddField("premium_features", default_factory=list),
        )

        assert op.forward({"type": "premium"})["premium_features"] == []
        assert op.forward({"type": "basic"}) == {"type": "basic"}


class TestStepFromOperations:
    """Tests for MigrationStep.from_operations."""

    @pytest.mark.asyncio
    async def test_applies_operations_in_order(self):
        """Operations are chained; the original document is not mutated."""
        step = MigrationStep.from_operations(
            1,
            [
                RenameField("old_name", "name"),
                TransformField("name", func=str.title),
                RemoveField("deprecated"),
            ],
            description="Normalize names",
        )
        original = {"old_name": "ada lovelace", "deprecated": True}

        result = await step.apply(original)

        assert result == {"name": "Ada Lovelace"}
        assert original == {"old_name": "ada lovelace", "deprecated": True}
        assert step.description == "Normalize names"

    @pytest.mark.asyncio
    async def test_unchanged_document_is_stamp_only(self):
        """A no-op result is reported as None so nothing counts as modified."""
        step = MigrationStep.from_operations(1, [AddField("name", default="x")])

        assert await step.apply({"name": "already"}) is None

    @pytest.mark.asyncio
    async def test_step_without_transform(self):
        """A bare step only stamps the version."""
        assert await MigrationStep(id=4).apply({"a": 1}) is None
