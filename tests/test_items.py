"""Tests for task item conversions."""

from msbuild_refs.items import TaskItem, as_strings, as_task_items


class TestTaskItemConversions:
    """Tests for as_task_items and as_strings."""

    def test_as_task_items(self):
        """Test each string becomes an item spec."""
        items = as_task_items(["a.dll", "b.dll"])

        assert items == [TaskItem("a.dll"), TaskItem("b.dll")]

    def test_as_strings(self):
        """Test item specs are extracted in order."""
        assert as_strings([TaskItem("x.cs"), TaskItem("z.cs")]) == ["x.cs", "z.cs"]

    def test_accepts_generators(self):
        """Test any iterable is accepted."""
        assert as_strings(as_task_items(s for s in ["one", "two"])) == ["one", "two"]

    def test_str_is_item_spec(self):
        assert str(TaskItem("a.dll")) == "a.dll"
