# =============================================================================
# core/resources/expenses.py - Expenses Entity
# =============================================================================
# A single expense entry. Amount is kept as text, as entered by the user.
# =============================================================================

from core.models.resource import FieldSpec, FieldType, ResourceDescriptor

expenses = ResourceDescriptor(
    name="expenses",
    description="Expense entries of an organization",
    fields=(
        FieldSpec("title", FieldType.TEXT, example="Team lunch"),
        FieldSpec("amount", FieldType.TEXT, example="42.50"),
        FieldSpec("category", FieldType.TEXT, example="Meals"),
        FieldSpec("date", FieldType.DATE, example="2024-01-15"),
    ),
)
