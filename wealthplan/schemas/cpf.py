"""CPF contribution breakdown returned for one month of salary."""

from pydantic import BaseModel, Field


class CpfContribution(BaseModel):
    employee: float
    employer: float
    total: float
    oa: float
    sa: float
    ma: float
    take_home: float
    cpfable_salary: float = Field(ge=0)
    excess_salary: float = Field(ge=0)
