"""
Result Schemas
==============

Pydantic models for request bodies accepted by the results API.
"""

from typing import Dict, List, Union

from pydantic import BaseModel, Field, StrictStr, confloat, conint, constr, model_validator


Score = Union[
    conint(strict=True, ge=0),
    confloat(strict=True, ge=0, allow_inf_nan=False),
]

# Question indices arrive as JSON object keys, so they are digit strings
QuestionIndex = constr(pattern=r'^[0-9]+$')


class QuizResult(BaseModel):
    """A finished quiz attempt as submitted by the client."""
    title: constr(strict=True, strip_whitespace=True, min_length=1) = Field(description="Quiz or combined quiz label")
    score: Score = Field(description="Questions answered correctly")
    total: Score = Field(description="Questions in the quiz")
    answers: Dict[QuestionIndex, List[StrictStr]] = Field(description="Selected option labels per question index")

    @model_validator(mode='after')
    def check_score_within_total(self):
        if self.score > self.total:
            raise ValueError("score must be between 0 and total")
        return self
