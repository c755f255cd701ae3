# =============================================================================
# core/resources/tasks.py - Tasks Entity
# =============================================================================
# A to-do item. Pure table declaration: routes, schemas and documentation
# are generated from it.
# =============================================================================

from core.models.resource import FieldSpec, FieldType, ResourceDescriptor

tasks = ResourceDescriptor(
    name="tasks",
    description="To-do items of an organization",
    fields=(
        FieldSpec("title", FieldType.TEXT, example="Buy milk"),
        FieldSpec("description", FieldType.TEXT, nullable=True, example="Two litres, semi-skimmed"),
        FieldSpec("completed", FieldType.BOOLEAN, default=False),
    ),
)
