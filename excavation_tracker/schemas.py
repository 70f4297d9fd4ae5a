from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
import math
from typing import Optional
from datetime import date, datetime
from .models import JobStatus
from .calculators.volume import DEFAULT_MATERIAL_WEIGHT, DEFAULT_IMPORT_UNIT_COST

# Request bodies and responses use camelCase keys (jobId, pipeLength, ...).
# Numbers may arrive as JSON numbers or numeric strings; anything else is a 400.


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _required_text(value):
    if value is None:
        raise ValueError("Field cannot be null")
    value = value.strip()
    if not value:
        raise ValueError("Field cannot be empty")
    return value


def _not_null(value):
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# Lax mode would turn true/false into 1/0
def _not_bool(value):
    if isinstance(value, bool):
        raise ValueError("Expected a number, not a boolean")
    return value


def _iso_date_or_none(value):
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("Start date must be an ISO date (YYYY-MM-DD)")
    return value


# --- Jobs ---

class JobBase(CamelModel):
    name: str
    location: str
    client: str
    start_date: Optional[str] = None
    status: JobStatus = JobStatus.PENDING
    notes: Optional[str] = None

    @field_validator("name", "location", "client")
    @classmethod
    def check_text(cls, v):
        return _required_text(v)

    @field_validator("start_date")
    @classmethod
    def check_start_date(cls, v):
        return _iso_date_or_none(v)


class JobCreate(JobBase):
    pass


class JobUpdate(CamelModel):
    name: Optional[str] = None
    location: Optional[str] = None
    client: Optional[str] = None
    start_date: Optional[str] = None
    status: Optional[JobStatus] = None
    notes: Optional[str] = None

    # Validators only run for keys present in the body: an explicit null is
    # rejected for required columns, an omitted key leaves the column alone
    @field_validator("name", "location", "client")
    @classmethod
    def check_text(cls, v):
        return _required_text(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return _not_null(v)

    @field_validator("start_date")
    @classmethod
    def check_start_date(cls, v):
        return _iso_date_or_none(v)


class Job(JobBase):
    id: int


# --- Estimates ---

class EstimateInputs(CamelModel):
    """Dimensions and rates: everything the cost formulas need."""
    pipe_length: float = Field(gt=0, allow_inf_nan=False)
    trench_width: float = Field(gt=0, allow_inf_nan=False)
    trench_depth: float = Field(gt=0, allow_inf_nan=False)
    material_weight: float = Field(DEFAULT_MATERIAL_WEIGHT, gt=0, allow_inf_nan=False)
    import_unit_cost: float = Field(DEFAULT_IMPORT_UNIT_COST, gt=0, allow_inf_nan=False)
    estimated_hours: float = Field(0.0, ge=0, allow_inf_nan=False)

    @field_validator("material_weight", "import_unit_cost", "estimated_hours", mode="before")
    @classmethod
    def check_rates(cls, v):
        return _not_null(v)

    @field_validator(
        "pipe_length", "trench_width", "trench_depth",
        "material_weight", "import_unit_cost", "estimated_hours", mode="before",
    )
    @classmethod
    def check_not_bool(cls, v):
        return _not_bool(v)

    @model_validator(mode="after")
    def check_volume_finite(self):
        if not math.isfinite(self.pipe_length * self.trench_width * self.trench_depth):
            raise ValueError("Trench volume is too large")
        return self


class EstimateCreate(EstimateInputs):
    job_id: int
    description: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("job_id", mode="before")
    @classmethod
    def check_job_id(cls, v):
        return _not_bool(v)


class EstimateUpdate(CamelModel):
    job_id: Optional[int] = None
    description: Optional[str] = None
    pipe_length: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    trench_width: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    trench_depth: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    material_weight: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    import_unit_cost: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    estimated_hours: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    notes: Optional[str] = None

    @field_validator(
        "job_id", "pipe_length", "trench_width", "trench_depth",
        "material_weight", "import_unit_cost", "estimated_hours",
    )
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)

    @field_validator(
        "job_id", "pipe_length", "trench_width", "trench_depth",
        "material_weight", "import_unit_cost", "estimated_hours", mode="before",
    )
    @classmethod
    def check_not_bool(cls, v):
        return _not_bool(v)


class Estimate(CamelModel):
    id: int
    job_id: int
    description: Optional[str] = None
    pipe_length: float
    trench_width: float
    trench_depth: float
    cubic_yards: float
    material_weight: float
    import_unit_cost: float
    estimated_hours: Optional[float] = 0.0
    created_at: Optional[datetime] = None
    notes: Optional[str] = None


# --- Cost breakdown ---

class EquipmentLabor(CamelModel):
    excavator_250: float = Field(alias="excavator250")
    excavator_200: float = Field(alias="excavator200")
    loader: float
    total: float


class CrewLabor(CamelModel):
    pipe_guy: float
    top_guy: float
    total: float


class CostBreakdown(CamelModel):
    cubic_feet: float
    cubic_yards: float
    tons_per_cubic_yard: float
    total_tons: float
    import_cost: float
    haul_off_cost: float
    equipment: EquipmentLabor
    crew: CrewLabor
    combined_labor_total: float
    grand_total: float


class EstimateBreakdown(CostBreakdown):
    estimate_id: int
    job_id: int
