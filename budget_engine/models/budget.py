"""
Core Data Models for the Budget Engine

These models define the schemas for everything the host application
hands to the engine: people and their income, expenses, and the
household distribution settings.

DESIGN DECISION: The engine only ever READS these models.
Creating, editing and storing them belongs to the surrounding app.

The host app stores records with camelCase keys (personId, categoryTag,
distributionMethod). We accept those directly as aliases, and plain
snake_case field names work too.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# Average month length used by the daily view
AVERAGE_DAYS_PER_MONTH = 30.44

DEFAULT_CATEGORY_TAG = "Misc"


class InvalidFrequencyError(ValueError):
    """A recurrence frequency the engine does not recognize."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unrecognized frequency: {value!r}")


class InvalidViewModeError(ValueError):
    """A display unit other than daily, monthly or yearly."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unrecognized view mode: {value!r}")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Frequency(str, Enum):
    """
    Recurrence unit of an income source or expense.

    DESIGN DECISION: An unknown frequency is a data entry bug.
    We never guess a multiplier for it; parsing fails loudly instead.
    """
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_TIME = "one-time"

    @classmethod
    def parse(cls, value: Any) -> "Frequency":
        """
        Parse a frequency from user or storage input.

        Case-insensitive; underscores and spaces count as dashes.
        Raises InvalidFrequencyError for anything unrecognized.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidFrequencyError(value)

        key = value.strip().lower().replace("_", "-").replace(" ", "-")
        key = _FREQUENCY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise InvalidFrequencyError(value) from None


_FREQUENCY_ALIASES = {
    "biweekly": "bi-weekly",
    "fortnightly": "bi-weekly",
    "annual": "yearly",
    "annually": "yearly",
    "once": "one-time",
    "onetime": "one-time",
}


class ViewMode(str, Enum):
    """Display unit selected by the presentation layer."""
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Any) -> "ViewMode":
        """Parse a view mode, raising InvalidViewModeError when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidViewModeError(value) from None

    def from_yearly(
        self,
        yearly_amount: float,
        days_per_month: float = AVERAGE_DAYS_PER_MONTH,
    ) -> float:
        """Convert a yearly figure into this display unit."""
        if self is ViewMode.YEARLY:
            return yearly_amount
        monthly = yearly_amount / 12
        if self is ViewMode.MONTHLY:
            return monthly
        return monthly / days_per_month


class ExpenseCategory(str, Enum):
    """
    Who carries an expense.

    HOUSEHOLD costs are shared across all people by the distribution method.
    PERSONAL costs belong to exactly one person.
    """
    HOUSEHOLD = "household"
    PERSONAL = "personal"


class DistributionMethod(str, Enum):
    """Policy for splitting household costs across people."""
    EVEN = "even"
    INCOME_BASED = "income-based"


# =============================================================================
# INPUT ENTITIES
# =============================================================================

class _EngineModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
        frozen=True,
    )


def _coerce_iso_date(value: Any) -> Any:
    # Host app stores full ISO timestamps for some dates
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        value = value.strip()
        return value[:10] if value else None
    return value


FrequencyField = Annotated[Frequency, BeforeValidator(Frequency.parse)]
IsoDate = Annotated[Optional[date], BeforeValidator(_coerce_iso_date)]


class Income(_EngineModel):
    """A single income source belonging to a person."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique income source ID"
    )
    label: str = Field(
        default="",
        max_length=200,
        description="Display label (e.g., 'Salary')"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Amount received per frequency period"
    )
    frequency: FrequencyField
    person_id: Optional[str] = None


class Person(_EngineModel):
    """A member of the household and their income sources."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique person ID"
    )
    name: str = Field(
        default="",
        max_length=200,
        description="Display name"
    )
    income: list[Income] = Field(
        default_factory=list,
        description="Ordered income sources"
    )


class Expense(_EngineModel):
    """
    A recurring or one-time cost.

    Dates are only read by expiry tracking. The aggregator ignores them
    unless it is asked to total as of a given date.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Unique expense ID"
    )
    description: str = Field(
        default="",
        max_length=500,
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Amount per frequency period"
    )
    frequency: FrequencyField
    category: ExpenseCategory
    person_id: Optional[str] = Field(
        default=None,
        description="Owning person (personal expenses only)"
    )
    start_date: IsoDate = Field(
        default=None,
        alias="date",
        description="Date the expense was added or starts"
    )
    end_date: IsoDate = Field(
        default=None,
        description="Last day a recurring expense applies"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    category_tag: str = Field(
        default=DEFAULT_CATEGORY_TAG,
        description="Reporting tag (e.g., 'Groceries')"
    )

    @field_validator("category_tag", mode="before")
    @classmethod
    def default_blank_tag(cls, v: Any) -> Any:
        """Blank tags fall back to the default tag."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CATEGORY_TAG
        return v

    @model_validator(mode="after")
    def validate_owner_and_dates(self) -> "Expense":
        """Personal expenses need an owner; end date cannot precede start."""
        if self.category is ExpenseCategory.PERSONAL and not self.person_id:
            raise ValueError("Personal expenses require a person id")

        if self.start_date and self.end_date:
            if self.end_date < self.start_date:
                raise ValueError("End date cannot be before start date")

        return self

    @property
    def is_recurring(self) -> bool:
        return self.frequency is not Frequency.ONE_TIME


class HouseholdSettings(_EngineModel):
    """Household-wide configuration consumed by the allocator."""

    distribution_method: DistributionMethod = Field(
        default=DistributionMethod.EVEN,
        description="How household costs are split"
    )


class Budget(_EngineModel):
    """
    Everything needed to compute one budget.

    Only a container for engine inputs. Switching between budgets
    is handled by the host app.
    """

    id: str = Field(default="default")
    name: str = Field(default="")
    people: list[Person] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    household_settings: HouseholdSettings = Field(
        default_factory=HouseholdSettings
    )

    @field_validator("household_settings", mode="before")
    @classmethod
    def default_missing_settings(cls, v: Any) -> Any:
        """An absent settings object means an even split."""
        return HouseholdSettings() if v is None else v

    def find_person(self, person_id: str) -> Optional[Person]:
        """Look up a person by ID, None if missing."""
        for person in self.people:
            if person.id == person_id:
                return person
        return None
